"""Abstract base class for scoring providers and shared reply parsing."""

import re
from abc import ABC, abstractmethod

SCORING_INSTRUCTION = (
    "Score the relevance of the following message to the given prompt "
    "on a scale of 0-100. Respond with only a number."
)

# Deterministic decoding: a bare number needs only a few tokens.
SCORING_TEMPERATURE = 0
SCORING_MAX_TOKENS = 10

MIN_SCORE = 0
MAX_SCORE = 100

HIGH_RELEVANCE = 80
MEDIUM_RELEVANCE = 50

_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


def parse_leading_int(text: str | None) -> int:
    """Parse the longest leading digit run of ``text`` (after leading whitespace).

    No digit run, or no text at all, yields 0. ``"85"`` -> 85,
    ``" 72/100"`` -> 72, ``"Score: 85"`` -> 0, ``"-5"`` -> 0.
    """
    if not text:
        return 0
    match = _LEADING_INT_RE.match(text)
    if match is None:
        return 0
    return int(match.group(1))


def clamp_score(value: int) -> int:
    """Clamp to the 0-100 score range."""
    return max(MIN_SCORE, min(MAX_SCORE, value))


def reply_to_score(reply: str | None) -> int:
    """Turn a provider's free-text reply into a bounded integer score."""
    return clamp_score(parse_leading_int(reply))


def build_user_content(message_text: str, prompt_text: str) -> str:
    """Prompt/message pair as sent to every provider."""
    return f"Prompt: {prompt_text}\n\nMessage: {message_text}"


def relevance_band(score: int) -> str:
    """Bucket a score into 'high', 'medium' or 'low'."""
    if score >= HIGH_RELEVANCE:
        return "high"
    if score >= MEDIUM_RELEVANCE:
        return "medium"
    return "low"


class ScoringProvider(ABC):
    """Base class that every scoring provider must implement.

    Providers are built from an explicit API key; they never read the
    environment. ``env_var`` only tells callers where a key is usually kept.
    """

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique identifier for this provider (e.g. 'anthropic')."""

    @property
    @abstractmethod
    def default_model(self) -> str:
        """The default model ID used when no override is specified."""

    @property
    @abstractmethod
    def known_models(self) -> tuple[str, ...]:
        """Model IDs offered for this provider."""

    @property
    @abstractmethod
    def env_var(self) -> str:
        """Environment variable conventionally holding the API key."""

    @abstractmethod
    async def complete(
        self,
        message_text: str,
        prompt_text: str,
        model: str | None = None,
    ) -> str | None:
        """Ask the model to score one message and return its raw reply text.

        Args:
            message_text: The message being scored.
            prompt_text: The user's free-text search intent.
            model: Override the provider's default model. None uses default.

        Returns:
            Raw reply text (expected to be a bare number), or None if empty.
        """

    def _require_key(self) -> str:
        if not self._api_key:
            msg = f"{self.provider_id} API key is required (usually set via {self.env_var})"
            raise ValueError(msg)
        return self._api_key
