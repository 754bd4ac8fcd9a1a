"""Configuration models and YAML loader for slacksift."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

SCORING_PROVIDERS = ("openai", "anthropic", "google")


class SlackConfig(BaseModel):
    """Slack credentials and transport mode.

    Setting ``proxy_url`` switches the client to proxy mode: requests go to
    ``proxy_url + <api url>`` and the token travels in ``X-Slack-Token``.
    """

    model_config = ConfigDict(frozen=True)

    token: str = ""
    proxy_url: str | None = None
    timeout_s: float = Field(default=30.0, gt=0)

    @field_validator("token")
    @classmethod
    def token_stripped(cls, v: str) -> str:
        return v.strip()

    @field_validator("proxy_url")
    @classmethod
    def blank_proxy_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    @property
    def use_proxy(self) -> bool:
        return self.proxy_url is not None


class ScoringConfig(BaseModel):
    """Language-model provider used for relevance scoring."""

    model_config = ConfigDict(frozen=True)

    provider: str = "openai"
    api_key: str = ""
    model: str | None = None

    @field_validator("provider")
    @classmethod
    def provider_known(cls, v: str) -> str:
        v = v.lower().strip()
        if v not in SCORING_PROVIDERS:
            msg = f"provider must be one of {list(SCORING_PROVIDERS)}, got '{v}'"
            raise ValueError(msg)
        return v

    @field_validator("model")
    @classmethod
    def blank_model_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    def has_plausible_key(self) -> bool:
        """Cheap offline check: provider keys are all well over 20 characters."""
        return len(self.api_key.strip()) > 20


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    model_config = ConfigDict(frozen=True)

    slack: SlackConfig = Field(default_factory=SlackConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)

    def with_overrides(
        self,
        *,
        slack_token: str | None = None,
        scoring_api_key: str | None = None,
    ) -> "Settings":
        """Return a copy with blank credentials filled from the given values."""
        slack = self.slack
        scoring = self.scoring
        if slack_token and not slack.token:
            slack = slack.model_copy(update={"token": slack_token.strip()})
        if scoring_api_key and not scoring.api_key:
            scoring = scoring.model_copy(update={"api_key": scoring_api_key.strip()})
        return self.model_copy(update={"slack": slack, "scoring": scoring})
