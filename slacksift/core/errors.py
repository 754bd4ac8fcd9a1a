"""Exceptions raised by the messaging client.

Scoring failures never appear here: they are absorbed into ScoreResult.
"""

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


class SlackAPIError(Exception):
    """Base class for failures reported by (or on the way to) the Slack API."""

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE, error_code: str | None = None) -> None:
        super().__init__(message)
        self.error_code = error_code


class SearchFailure(SlackAPIError):
    """search.messages returned a non-2xx status or ``ok: false``."""


class CrossOriginBlocked(SearchFailure):
    """The request was rejected by a cross-origin policy on the way to Slack.

    Usually means a relay is needed; see ``SlackConfig.proxy_url``.
    """


class DeleteFailure(SlackAPIError):
    """chat.delete failed in transport or returned ``ok: false``."""


class InvalidPermalink(SlackAPIError):
    """A permalink did not contain a channel and a ``p<digits>`` timestamp."""

    def __init__(self, permalink: str) -> None:
        super().__init__("Invalid message permalink", error_code="invalid_permalink")
        self.permalink = permalink
