"""Bulk delete of previously fetched search results."""

import logging
from collections.abc import Iterable

from slacksift.core.schemas import DeleteReport, ScoredMessage
from slacksift.platforms.base import MessagingPlatform

logger = logging.getLogger(__name__)


async def delete_selected(
    messages: list[ScoredMessage],
    selected_ids: Iterable[str],
    messaging: MessagingPlatform,
) -> DeleteReport:
    """Delete each selected message, one request at a time.

    A failed delete is logged and skipped; the batch always runs to the end.
    ``messages`` is not modified. Pass the report's ``deleted_ids`` to
    :func:`prune_messages` to update the held results.
    """
    by_id = {m.id: m for m in messages}
    report = DeleteReport()

    for msg_id in selected_ids:
        message = by_id.get(msg_id)
        if message is None:
            logger.debug("Selected id %s not in results, skipping", msg_id)
            report.missing_ids.append(msg_id)
            continue

        try:
            await messaging.delete_message(message.permalink)
        except Exception:
            logger.warning("Delete failed for %s (%s)", msg_id, message.permalink, exc_info=True)
            report.failed_ids.append(msg_id)
            continue

        report.deleted_ids.append(msg_id)

    logger.info(
        "Bulk delete: %d deleted, %d failed, %d missing",
        report.deleted_count, len(report.failed_ids), len(report.missing_ids),
    )
    return report


def prune_messages(messages: list[ScoredMessage], ids: Iterable[str]) -> list[ScoredMessage]:
    """Return ``messages`` without the given ids, order preserved."""
    drop = set(ids)
    return [m for m in messages if m.id not in drop]
