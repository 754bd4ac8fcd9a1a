"""Core data models for search, scoring, deletion and export."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel

DIRECT_MESSAGE_CHANNEL = "Direct Message"
NO_MESSAGES_NOTICE = "No messages found"


class SearchCriteria(BaseModel):
    """What the user asked for. Serialised with camelCase keys in exports."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    prompt_text: str = ""
    channel_filter: str = ""
    user_filter: str = ""
    date_from: str = ""
    date_to: str = ""


class RawSearchMatch(BaseModel):
    """One entry of ``messages.matches`` in a search.messages response.

    Slack nests the channel name (``{"channel": {"name": ...}}``); it is
    flattened into ``channel_name`` on validation.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    internal_id: str = Field(default="", alias="iid")
    text: str = ""
    author_name: str = Field(default="", alias="username")
    timestamp: str = Field(alias="ts")
    permalink_url: str = Field(default="", alias="permalink")
    channel_name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def flatten_channel(cls, data: Any) -> Any:
        if isinstance(data, dict) and "channel" in data:
            data = dict(data)
            channel = data.pop("channel")
            if isinstance(channel, dict):
                data.setdefault("channel_name", channel.get("name") or None)
        return data


class SlackSearchResponse(BaseModel):
    """Normalised body of a successful search.messages call."""

    ok: bool
    matches: list[RawSearchMatch] = Field(default_factory=list)
    total: int = 0


class SlackDeleteResponse(BaseModel):
    """Body of a chat.delete call."""

    ok: bool
    channel: str = ""
    ts: str = ""
    error: str | None = None


class DecodedPermalink(BaseModel):
    """Channel id and float timestamp string recovered from a permalink."""

    model_config = ConfigDict(frozen=True)

    channel_id: str
    timestamp_token: str


class ScoreResult(BaseModel):
    """Outcome of one scoring call. ``error`` is set when the score fell back to 0."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(default=0, ge=0, le=100)
    error: str | None = None


class ScoredMessage(BaseModel):
    """A search match paired with its relevance score.

    Frozen; lives only for the current session (or inside an export file).
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    text: str
    author: str
    channel: str = DIRECT_MESSAGE_CHANNEL
    timestamp: str
    relevance_score: int = Field(ge=0, le=100)
    permalink: str


class SearchOutcome(BaseModel):
    """Ranked result of one search. ``notice`` explains an empty result."""

    model_config = ConfigDict(frozen=True)

    messages: list[ScoredMessage] = Field(default_factory=list)
    no_results: bool = False
    notice: str | None = None


class DeleteReport(BaseModel):
    """Per-id outcome of a bulk delete."""

    deleted_ids: list[str] = Field(default_factory=list)
    failed_ids: list[str] = Field(default_factory=list)
    missing_ids: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def deleted_count(self) -> int:
        return len(self.deleted_ids)


class ExportData(BaseModel):
    """Top-level shape of a JSON export file."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    messages: list[ScoredMessage]
    export_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    search_criteria: SearchCriteria = Field(default_factory=SearchCriteria)


def format_slack_timestamp(ts: str) -> str:
    """Format a Slack ``ts`` (float Unix seconds as a string) as UTC ``YYYY-MM-DD HH:MM:SS``.

    Unparseable values are returned unchanged.
    """
    try:
        seconds = float(ts)
    except (TypeError, ValueError):
        return ts
    return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
