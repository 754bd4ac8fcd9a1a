"""CSV and JSON export of scored messages."""

import csv
import io
import logging
from collections.abc import Collection
from datetime import datetime

from slacksift.core.schemas import ExportData, ScoredMessage, SearchCriteria

logger = logging.getLogger(__name__)

CSV_HEADER = ("Text", "User", "Channel", "Timestamp", "Relevance Score")


def select_for_export(
    messages: list[ScoredMessage],
    selected_ids: Collection[str] | None = None,
) -> list[ScoredMessage]:
    """The selected messages, or all of them when nothing is selected."""
    if not selected_ids:
        return list(messages)
    return [m for m in messages if m.id in selected_ids]


def export_csv(messages: list[ScoredMessage]) -> str:
    """Render messages as CSV with a header row.

    Fields are quoted only when they contain a comma, quote or newline;
    embedded quotes are doubled. Rows are separated by ``\\n``.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for m in messages:
        writer.writerow([m.text, m.author, m.channel, m.timestamp, str(m.relevance_score)])
    # No trailing newline after the last row.
    return buffer.getvalue().rstrip("\n")


def export_json(
    messages: list[ScoredMessage],
    criteria: SearchCriteria,
    export_date: datetime | None = None,
) -> str:
    """Render ``{messages, exportDate, searchCriteria}`` as indented JSON."""
    data = ExportData(messages=messages, search_criteria=criteria)
    if export_date is not None:
        data = data.model_copy(update={"export_date": export_date})
    logger.debug("Exporting %d messages as JSON", len(messages))
    return data.model_dump_json(by_alias=True, indent=2)


def load_export_json(text: str) -> ExportData:
    """Parse a JSON export back into ExportData.

    Raises:
        pydantic.ValidationError: If the text is not a valid export.
    """
    return ExportData.model_validate_json(text)
