"""Slack Web API client: token check, message search, message delete."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from slacksift.core.config import SlackConfig
from slacksift.core.errors import (
    GENERIC_ERROR_MESSAGE,
    CrossOriginBlocked,
    DeleteFailure,
    InvalidPermalink,
    SearchFailure,
)
from slacksift.core.schemas import (
    RawSearchMatch,
    SearchCriteria,
    SlackDeleteResponse,
    SlackSearchResponse,
)
from slacksift.platforms.base import MessagingPlatform
from slacksift.platforms.slack.permalink import decode_permalink
from slacksift.platforms.slack.searcher import (
    AUTH_TEST_URL,
    CHAT_DELETE_URL,
    SEARCH_MESSAGES_URL,
    build_search_params,
)

logger = logging.getLogger(__name__)

PROXY_TOKEN_HEADER = "X-Slack-Token"

MALFORMED_SEARCH_MESSAGE = "Slack returned a malformed search response"


class SlackClient(MessagingPlatform):
    """Slack messaging client.

    Constructed from a plain SlackConfig; reads no environment state.
    ``transport`` is passed straight to httpx (tests inject a MockTransport).

    Usage::

        client = SlackClient(SlackConfig(token="xoxp-..."))
        if await client.validate_token():
            response = await client.search_messages(criteria)
    """

    def __init__(
        self,
        config: SlackConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport

    @property
    def platform_id(self) -> str:
        return "slack"

    async def validate_token(self) -> bool:
        """Call auth.test. True only for a 2xx response whose body has ``ok: true``."""
        try:
            async with self._client() as client:
                response = await client.post(self._url(AUTH_TEST_URL))
            if not response.is_success:
                logger.warning("Token validation failed: HTTP %d", response.status_code)
                return False
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Token validation error: %s", e)
            return False

        return isinstance(data, dict) and data.get("ok") is True

    async def search_messages(self, criteria: SearchCriteria) -> SlackSearchResponse:
        """Run search.messages for the given criteria.

        Raises:
            SearchFailure: Non-2xx status, ``ok: false`` body, or matches that
                do not validate.
            CrossOriginBlocked: Transport error caused by a cross-origin policy.
            httpx.HTTPError: Any other transport error (re-raised after logging).
        """
        params = build_search_params(criteria)
        logger.info("Searching Slack: query=%r", params["query"])

        try:
            async with self._client() as client:
                response = await client.get(self._url(SEARCH_MESSAGES_URL), params=params)
        except httpx.HTTPError as e:
            logger.error("Search error: %s", e)
            if _is_cross_origin_error(e):
                raise CrossOriginBlocked(str(e), error_code="cors") from e
            raise

        data = _json_body(response)
        if not response.is_success or data.get("ok") is not True:
            error = data.get("error")
            logger.error("Search failed: HTTP %d, error=%s", response.status_code, error)
            raise SearchFailure(error or GENERIC_ERROR_MESSAGE, error_code=error)

        messages = data.get("messages") or {}
        try:
            matches = [RawSearchMatch.model_validate(m) for m in messages.get("matches") or []]
            result = SlackSearchResponse(
                ok=True, matches=matches, total=messages.get("total") or len(matches),
            )
        except ValidationError as e:
            logger.error("Malformed search response: %s", e)
            raise SearchFailure(MALFORMED_SEARCH_MESSAGE, error_code="malformed_response") from e

        logger.info("Search returned %d matches", len(result.matches))
        return result

    async def delete_message(self, permalink: str) -> SlackDeleteResponse:
        """Delete the message a permalink points to via chat.delete.

        Raises:
            InvalidPermalink: The permalink could not be decoded (no request made).
            DeleteFailure: Transport error, non-2xx status or ``ok: false`` body.
        """
        decoded = decode_permalink(permalink)
        if decoded is None:
            raise InvalidPermalink(permalink)

        payload = {"channel": decoded.channel_id, "ts": decoded.timestamp_token}
        try:
            async with self._client() as client:
                response = await client.post(self._url(CHAT_DELETE_URL), json=payload)
        except httpx.HTTPError as e:
            logger.error("Delete error for %s: %s", permalink, e)
            raise DeleteFailure(str(e) or GENERIC_ERROR_MESSAGE) from e

        data = _json_body(response)
        if not response.is_success or data.get("ok") is not True:
            error = data.get("error")
            logger.error("Delete failed for %s: HTTP %d, error=%s",
                         permalink, response.status_code, error)
            raise DeleteFailure(error or GENERIC_ERROR_MESSAGE, error_code=error)

        logger.debug("Deleted %s/%s", decoded.channel_id, decoded.timestamp_token)
        return SlackDeleteResponse.model_validate(data)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self._headers(),
            timeout=self._config.timeout_s,
            transport=self._transport,
        )

    def _url(self, endpoint: str) -> str:
        if self._config.proxy_url is not None:
            return f"{self._config.proxy_url}{endpoint}"
        return endpoint

    def _headers(self) -> dict[str, str]:
        # Proxy mode: the relay rewrites X-Slack-Token into the real auth header.
        if self._config.use_proxy:
            return {
                "Content-Type": "application/json",
                PROXY_TOKEN_HEADER: self._config.token,
            }
        return {
            "Authorization": f"Bearer {self._config.token}",
            "Content-Type": "application/json",
        }


def _json_body(response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON object body, returning {} for anything else."""
    try:
        data = response.json()
    except ValueError:
        logger.debug("Non-JSON body (HTTP %d)", response.status_code)
        return {}
    return data if isinstance(data, dict) else {}


def _is_cross_origin_error(error: Exception) -> bool:
    return "cors" in str(error).lower()
