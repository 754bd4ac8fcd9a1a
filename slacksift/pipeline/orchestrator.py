"""Orchestrator: wires the messaging search, per-message scoring and ranking.

Data flow:
  1. Platform search → raw matches
  2. Empty → "No messages found" outcome, no scoring calls
  3. Sequential scoring, one call per match (keeps under provider rate limits)
  4. Stable sort by score descending (ties keep search order)
"""

import logging

from slacksift.core.schemas import (
    DIRECT_MESSAGE_CHANNEL,
    NO_MESSAGES_NOTICE,
    RawSearchMatch,
    ScoredMessage,
    ScoreResult,
    SearchCriteria,
    SearchOutcome,
    format_slack_timestamp,
)
from slacksift.platforms.base import MessagingPlatform
from slacksift.scoring.scorer import RelevanceScorer

logger = logging.getLogger(__name__)


async def run_search(
    criteria: SearchCriteria,
    messaging: MessagingPlatform,
    scorer: RelevanceScorer,
) -> SearchOutcome:
    """Search, score each match against the prompt, and rank.

    Search failures propagate to the caller; scoring failures are already
    folded into score 0 by the scorer.
    """
    response = await messaging.search_messages(criteria)

    if not response.matches:
        logger.info("No messages found")
        return SearchOutcome(messages=[], no_results=True, notice=NO_MESSAGES_NOTICE)

    scored: list[ScoredMessage] = []
    failures = 0
    for match in response.matches:
        result = await scorer.score_message(match.text, criteria.prompt_text)
        if result.error:
            failures += 1
        scored.append(to_scored_message(match, result))

    if failures:
        logger.warning("%d of %d messages could not be scored", failures, len(scored))

    ranked = rank_messages(scored)
    logger.info("Ranked %d messages (top score %d)", len(ranked), ranked[0].relevance_score)
    return SearchOutcome(messages=ranked)


def to_scored_message(match: RawSearchMatch, result: ScoreResult) -> ScoredMessage:
    """Pair one raw match with its score."""
    return ScoredMessage(
        id=match.internal_id or match.permalink_url or match.timestamp,
        text=match.text,
        author=match.author_name,
        channel=match.channel_name or DIRECT_MESSAGE_CHANNEL,
        timestamp=format_slack_timestamp(match.timestamp),
        relevance_score=result.score,
        permalink=match.permalink_url,
    )


def rank_messages(messages: list[ScoredMessage]) -> list[ScoredMessage]:
    """Return a new list sorted by relevance descending. Stable for equal scores."""
    return sorted(messages, key=lambda m: m.relevance_score, reverse=True)
