"""
Listing collection coordinator that aggregates posts from multiple sources.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from feedproxy.core.errors import classify_error
from feedproxy.core.filters import apply_filters
from feedproxy.models import AggregatedResult, FetchError, FetchOutcome, FilterCriteria, Post
from feedproxy.sources.common import normalize_identifier
from feedproxy.sources.reddit import RedditFetcher
from feedproxy.utils import now_utc


logger = logging.getLogger(__name__)


def deduplicate_posts(posts: Iterable[Post]) -> List[Post]:
    """
    Drop posts whose id was already seen; the first occurrence wins.

    The key is the bare post id, not qualified by source.
    """
    seen_ids: set[str] = set()
    unique_posts: List[Post] = []

    for post in posts:
        if post.id in seen_ids:
            continue
        seen_ids.add(post.id)
        unique_posts.append(post)

    return unique_posts


def sort_posts(posts: Iterable[Post]) -> List[Post]:
    """Highest score first; equal scores newest first."""
    return sorted(posts, key=lambda post: (post.score, post.created_at), reverse=True)


async def fetch_source(
    fetcher: RedditFetcher,
    source: str,
    criteria: FilterCriteria,
    now: Optional[datetime] = None,
) -> FetchOutcome:
    """
    Run normalize → fetch → parse → filter for one source.

    Never raises: any failure is classified and returned as the outcome's error.

    Args:
        fetcher: Upstream fetcher
        source: Identifier exactly as the caller supplied it
        criteria: Filters to apply to the fetched posts
        now: Reference time for the recency filter

    Returns:
        FetchOutcome holding either the filtered posts or a FetchError
    """
    identifier = normalize_identifier(source)
    try:
        posts = await fetcher.fetch(identifier, criteria.limit)
    except Exception as e:
        classified = classify_error(e)
        logger.error(
            "Error fetching r/%s: %s (%s)", identifier, classified.message, classified.classification.value
        )
        return FetchOutcome(
            source=source,
            identifier=identifier,
            error=FetchError(
                source=source,
                classification=classified.classification,
                message=classified.message,
                status_code=classified.status_code,
                error_code=classified.error,
                details=classified.details,
            ),
        )

    filtered = apply_filters(posts, criteria, now=now)
    logger.info("r/%s: %d of %d posts after filtering", identifier, len(filtered), len(posts))
    return FetchOutcome(source=source, identifier=identifier, posts=filtered)


def merge_outcomes(outcomes: Sequence[FetchOutcome], criteria: FilterCriteria) -> AggregatedResult:
    """Concatenate successful outcomes in source order, then dedup and rank."""
    all_posts = [post for outcome in outcomes for post in outcome.posts]
    errors = [outcome.error for outcome in outcomes if outcome.error is not None]
    unique_posts = deduplicate_posts(all_posts)
    return AggregatedResult(posts=sort_posts(unique_posts), errors=errors, criteria=criteria)


async def collect_posts(
    fetcher: RedditFetcher,
    sources: Sequence[str],
    criteria: FilterCriteria,
    now: Optional[datetime] = None,
) -> AggregatedResult:
    """
    Collect filtered posts from several sources concurrently.

    Args:
        fetcher: Upstream fetcher
        sources: Identifiers as supplied by the caller, in request order
        criteria: Filters applied to every source
        now: Reference time for the recency filter (defaults to current UTC)

    Returns:
        AggregatedResult with unique ranked posts and per-source errors
    """
    reference = now or now_utc()
    # gather preserves argument order, so merging does not depend on arrival order.
    outcomes = await asyncio.gather(
        *(fetch_source(fetcher, source, criteria, now=reference) for source in sources)
    )
    result = merge_outcomes(outcomes, criteria)
    logger.info("Total unique posts: %d (%d source errors)", len(result.posts), len(result.errors))
    return result
