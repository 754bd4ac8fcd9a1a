"""Slack Web API endpoints and search request builder.

Pure functions, zero network dependency.
"""

from slacksift.core.schemas import SearchCriteria

API_BASE = "https://slack.com/api/"
AUTH_TEST_URL = f"{API_BASE}auth.test"
SEARCH_MESSAGES_URL = f"{API_BASE}search.messages"
CHAT_DELETE_URL = f"{API_BASE}chat.delete"

# search.messages documents 100 as the per-request maximum.
MAX_RESULTS_PER_REQUEST = 100

WILDCARD_QUERY = "*"


def build_query(criteria: SearchCriteria) -> str:
    """Build the ``query`` string: the prompt (or ``*``) plus date modifiers."""
    terms = [criteria.prompt_text.strip() or WILDCARD_QUERY]
    if criteria.date_from.strip():
        terms.append(f"after:{criteria.date_from.strip()}")
    if criteria.date_to.strip():
        terms.append(f"before:{criteria.date_to.strip()}")
    return " ".join(terms)


def build_search_params(criteria: SearchCriteria) -> dict[str, str]:
    """Build query parameters for search.messages.

    ``in`` and ``from`` are only present when the matching filter is set.
    """
    params: dict[str, str] = {
        "query": build_query(criteria),
        "count": str(MAX_RESULTS_PER_REQUEST),
    }

    if criteria.channel_filter.strip():
        params["in"] = criteria.channel_filter.strip()

    if criteria.user_filter.strip():
        params["from"] = criteria.user_filter.strip()

    return params
