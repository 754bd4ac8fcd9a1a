"""OpenAI chat-completions scoring provider."""

import logging

from slacksift.scoring.base import (
    SCORING_INSTRUCTION,
    SCORING_MAX_TOKENS,
    SCORING_TEMPERATURE,
    ScoringProvider,
    build_user_content,
)

logger = logging.getLogger(__name__)


class OpenAIProvider(ScoringProvider):
    """Scoring provider using the OpenAI chat-completions API."""

    @property
    def provider_id(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return "gpt-4"

    @property
    def known_models(self) -> tuple[str, ...]:
        return ("gpt-4", "gpt-3.5-turbo")

    @property
    def env_var(self) -> str:
        return "OPENAI_API_KEY"

    async def complete(
        self,
        message_text: str,
        prompt_text: str,
        model: str | None = None,
    ) -> str | None:
        api_key = self._require_key()

        try:
            import openai
        except ImportError:
            msg = "openai is required for OpenAI scoring. Install with: pip install openai"
            raise ImportError(msg) from None

        client = openai.AsyncOpenAI(api_key=api_key)
        use_model = model or self.default_model

        logger.debug("Scoring with OpenAI (%s)", use_model)
        response = await client.chat.completions.create(
            model=use_model,
            messages=[
                {"role": "system", "content": SCORING_INSTRUCTION},
                {"role": "user", "content": build_user_content(message_text, prompt_text)},
            ],
            temperature=SCORING_TEMPERATURE,
            max_tokens=SCORING_MAX_TOKENS,
        )

        return response.choices[0].message.content  # type: ignore[no-any-return]
