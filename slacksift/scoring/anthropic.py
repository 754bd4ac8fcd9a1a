"""Anthropic Claude scoring provider."""

import logging

from slacksift.scoring.base import (
    SCORING_INSTRUCTION,
    SCORING_MAX_TOKENS,
    SCORING_TEMPERATURE,
    ScoringProvider,
    build_user_content,
)

logger = logging.getLogger(__name__)


class AnthropicProvider(ScoringProvider):
    """Scoring provider using the Anthropic messages API."""

    @property
    def provider_id(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return "claude-3-sonnet-20240229"

    @property
    def known_models(self) -> tuple[str, ...]:
        return ("claude-3-opus-20240229", "claude-3-sonnet-20240229")

    @property
    def env_var(self) -> str:
        return "ANTHROPIC_API_KEY"

    async def complete(
        self,
        message_text: str,
        prompt_text: str,
        model: str | None = None,
    ) -> str | None:
        api_key = self._require_key()

        try:
            import anthropic
        except ImportError:
            msg = "anthropic is required for Anthropic scoring. Install with: pip install anthropic"
            raise ImportError(msg) from None

        client = anthropic.AsyncAnthropic(api_key=api_key)
        use_model = model or self.default_model
        content = f"{SCORING_INSTRUCTION}\n\n{build_user_content(message_text, prompt_text)}"

        logger.debug("Scoring with Anthropic (%s)", use_model)
        message = await client.messages.create(
            model=use_model,
            max_tokens=SCORING_MAX_TOKENS,
            temperature=SCORING_TEMPERATURE,
            messages=[{"role": "user", "content": content}],
        )

        if not message.content:
            return None
        return message.content[0].text  # type: ignore[union-attr]
