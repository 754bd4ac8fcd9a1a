"""Permalink decoding.

Pure function, zero network dependency.
"""

import re

from slacksift.core.schemas import DecodedPermalink

# https://<team>.slack.com/archives/C0123ABCD/p1690000000123456
_PERMALINK_RE = re.compile(r"/archives/([A-Za-z0-9]+)/p(\d+)")

# Slack encodes ts as its digits with the decimal point removed; the
# fractional part is always 6 digits.
_FRACTION_DIGITS = 6


def decode_permalink(permalink: str) -> DecodedPermalink | None:
    """Extract the channel id and ``ts`` from a message permalink.

    Returns None if the URL lacks the channel segment or the ``p<digits>`` token.
    """
    match = _PERMALINK_RE.search(permalink or "")
    if match is None:
        return None

    channel, digits = match.group(1), match.group(2)
    if len(digits) <= _FRACTION_DIGITS:
        return None

    ts = f"{digits[:-_FRACTION_DIGITS]}.{digits[-_FRACTION_DIGITS:]}"
    return DecodedPermalink(channel_id=channel, timestamp_token=ts)
