"""Scoring provider registry with lazy loading.

Usage:
    from slacksift.scoring import get_provider

    provider = get_provider("anthropic", api_key)
    reply = await provider.complete(message_text, prompt_text)
"""

from __future__ import annotations

import importlib

from slacksift.scoring.base import ScoringProvider

__all__ = ["ScoringProvider", "available_providers", "get_provider"]

# Lazy registry: maps provider tag → (module_path, class_name)
_REGISTRY: dict[str, tuple[str, str]] = {
    "openai": ("slacksift.scoring.openai", "OpenAIProvider"),
    "anthropic": ("slacksift.scoring.anthropic", "AnthropicProvider"),
    "google": ("slacksift.scoring.gemini", "GeminiProvider"),
}


def get_provider(name: str, api_key: str = "") -> ScoringProvider:
    """Instantiate and return a scoring provider by tag.

    Args:
        name: Provider tag (openai, anthropic, google).
        api_key: Key passed to the provider; never read from the environment.

    Returns:
        A ScoringProvider instance.

    Raises:
        ValueError: If the provider tag is unknown.
    """
    if name not in _REGISTRY:
        valid = ", ".join(sorted(_REGISTRY))
        msg = f"Unknown scoring provider '{name}'. Available: {valid}"
        raise ValueError(msg)

    module_path, class_name = _REGISTRY[name]
    module = importlib.import_module(module_path)
    cls = getattr(module, class_name)
    return cls(api_key)  # type: ignore[no-any-return]


def available_providers() -> list[str]:
    """Return sorted list of registered provider tags."""
    return sorted(_REGISTRY)
