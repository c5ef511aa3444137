"""
Common utilities for listing source fetchers.
"""
from __future__ import annotations

from feedproxy.config import REDDIT_LISTING_URL, SHORT_LISTING_PREFIX


def _normalize_once(identifier: str) -> str:
    value = identifier.strip()

    if value.startswith(REDDIT_LISTING_URL):
        value = value[len(REDDIT_LISTING_URL):]

    if value.startswith(SHORT_LISTING_PREFIX):
        value = value[len(SHORT_LISTING_PREFIX):]

    if value.endswith("/"):
        value = value[:-1]

    if "?" in value:
        value = value.split("?", 1)[0]

    return value


def normalize_identifier(raw: str | None) -> str:
    """
    Reduce a subreddit reference to its bare name.

    Accepts full listing URLs ("https://www.reddit.com/r/SaaS/"), prefixed
    names ("r/SaaS"), or bare names, with optional trailing slash and query
    string. Case is preserved.

    Args:
        raw: Identifier as supplied by the caller

    Returns:
        Canonical identifier, possibly empty for degenerate input
    """
    value = raw or ""
    # Repeat until stable so that e.g. "r/r/x" or "x/?q" settle in one call.
    while True:
        normalized = _normalize_once(value)
        if normalized == value:
            return normalized
        value = normalized
