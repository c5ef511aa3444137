"""
Keyword and recency filtering for normalized posts.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from feedproxy.models import FilterCriteria, Post
from feedproxy.utils import now_utc


def parse_keywords(raw: str | Sequence[str] | None) -> tuple[str, ...]:
    """
    Turn a comma-separated string (or list of strings) into lowercase keywords.

    Args:
        raw: "a, B,c" style string, a list of strings, or None

    Returns:
        Tuple of trimmed lowercase keywords, empty tokens dropped
    """
    if not raw:
        return ()
    parts = raw.split(",") if isinstance(raw, str) else [str(part) for part in raw]
    return tuple(part.strip().lower() for part in parts if part.strip())


def build_criteria(
    keywords: str | Sequence[str] | None,
    hours: Optional[float],
    limit: int,
) -> FilterCriteria:
    return FilterCriteria(keywords=parse_keywords(keywords), max_age_hours=hours, limit=limit)


def matches_keywords(post: Post, keywords: Sequence[str]) -> bool:
    if not keywords:
        return True
    search_text = f"{post.title} {post.body_text}".lower()
    return any(keyword in search_text for keyword in keywords)


def is_recent(post: Post, max_age_hours: Optional[float], now: datetime) -> bool:
    # Applied literally when set: 0 keeps only posts created at `now` or later.
    if max_age_hours is None:
        return True
    try:
        cutoff = now - timedelta(hours=max_age_hours)
    except OverflowError:
        # Window reaches past datetime.min: no lower bound.
        return True
    return post.created_at >= cutoff


def apply_filters(
    posts: Iterable[Post],
    criteria: FilterCriteria,
    now: Optional[datetime] = None,
) -> List[Post]:
    """
    Keep posts that pass both the keyword and the recency predicate.

    Args:
        posts: Normalized posts, in listing order
        criteria: Keywords and max age to apply
        now: Reference time for the recency window (defaults to current UTC)

    Returns:
        Filtered posts, order preserved
    """
    reference = now or now_utc()
    return [
        post
        for post in posts
        if matches_keywords(post, criteria.keywords) and is_recent(post, criteria.max_age_hours, reference)
    ]


__all__ = ["apply_filters", "build_criteria", "is_recent", "matches_keywords", "parse_keywords"]
