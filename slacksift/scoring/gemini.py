"""Google Gemini scoring provider (google-genai SDK)."""

import logging

from slacksift.scoring.base import (
    SCORING_INSTRUCTION,
    SCORING_MAX_TOKENS,
    SCORING_TEMPERATURE,
    ScoringProvider,
    build_user_content,
)

logger = logging.getLogger(__name__)


class GeminiProvider(ScoringProvider):
    """Scoring provider using the Google Gemini generate-content API."""

    @property
    def provider_id(self) -> str:
        return "google"

    @property
    def default_model(self) -> str:
        return "gemini-pro"

    @property
    def known_models(self) -> tuple[str, ...]:
        return ("gemini-pro",)

    @property
    def env_var(self) -> str:
        return "GOOGLE_API_KEY"

    async def complete(
        self,
        message_text: str,
        prompt_text: str,
        model: str | None = None,
    ) -> str | None:
        api_key = self._require_key()

        try:
            from google import genai
            from google.genai import types as genai_types
        except ImportError:
            msg = "google-genai is required for Gemini scoring. Install with: pip install google-genai"
            raise ImportError(msg) from None

        use_model = model or self.default_model
        content = f"{SCORING_INSTRUCTION}\n\n{build_user_content(message_text, prompt_text)}"

        logger.debug("Scoring with Gemini (%s)", use_model)
        client = genai.Client(api_key=api_key)
        response = await client.aio.models.generate_content(
            model=use_model,
            contents=content,
            config=genai_types.GenerateContentConfig(
                temperature=SCORING_TEMPERATURE,
                max_output_tokens=SCORING_MAX_TOKENS,
            ),
        )

        # candidates[0].content.parts[0].text
        if not response.candidates:
            return None
        parts = response.candidates[0].content.parts or []
        return parts[0].text if parts else None
