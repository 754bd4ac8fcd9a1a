"""Relevance scoring entry point.

Dispatches to the configured provider and folds every failure into a
ScoreResult. One bad score never stops a batch; no retries.
"""

import logging

from slacksift.core.config import ScoringConfig
from slacksift.core.schemas import ScoreResult
from slacksift.scoring import get_provider
from slacksift.scoring.base import ScoringProvider, reply_to_score

logger = logging.getLogger(__name__)


class RelevanceScorer:
    """Scores (message, prompt) pairs with one provider.

    Usage::

        scorer = RelevanceScorer(ScoringConfig(provider="openai", api_key="sk-..."))
        result = await scorer.score_message("deploy is broken", "outages")
        result.score  # 0-100, 0 with result.error set on failure
    """

    def __init__(self, config: ScoringConfig, provider: ScoringProvider | None = None) -> None:
        self._config = config
        self._provider = provider

    async def score_message(self, message_text: str, prompt_text: str) -> ScoreResult:
        """Score one message. Never raises."""
        try:
            provider = self._resolve_provider()
            reply = await provider.complete(message_text, prompt_text, model=self._config.model)
        except Exception as e:
            logger.warning(
                "Scoring failed with provider '%s', using score 0",
                self._config.provider,
                exc_info=True,
            )
            return ScoreResult(score=0, error=str(e) or type(e).__name__)

        score = reply_to_score(reply)
        logger.debug("Scored %d (reply=%r)", score, reply)
        return ScoreResult(score=score)

    def _resolve_provider(self) -> ScoringProvider:
        if self._provider is None:
            self._provider = get_provider(self._config.provider, self._config.api_key)
        return self._provider
