"""
File: feedproxy/sources/reddit.py
Subreddit listing JSON fetcher (unauthenticated) and post normalization.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional

import httpx

from feedproxy.config import REDDIT_PERMALINK_BASE, FetcherConfig
from feedproxy.core.errors import MalformedResponseError, UpstreamHTTPError
from feedproxy.models import JsonDict, Post
from feedproxy.utils import extract_domain_from_url, from_epoch_seconds


logger = logging.getLogger(__name__)


def listing_url(config: FetcherConfig, identifier: str) -> str:
    return f"{config.base_url}{identifier}.json"


def _optional_text(payload: JsonDict, key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{key} is {type(value).__name__}, expected str")
    return value


def normalize_post(payload: JsonDict, source: str) -> Post:
    """
    Build a Post from one listing payload (the ``data`` of a child).

    Raises:
        KeyError, TypeError, ValueError: payload is not a usable post
    """
    url = _optional_text(payload, "url")
    permalink = payload["permalink"]
    if not isinstance(permalink, str):
        raise TypeError(f"permalink is {type(permalink).__name__}, expected str")
    return Post(
        id=str(payload["id"]),
        title=str(payload["title"]),
        author=str(payload.get("author") or ""),
        source=source,
        score=int(payload.get("score") or 0),
        comment_count=int(payload.get("num_comments") or 0),
        url=url,
        permalink=f"{REDDIT_PERMALINK_BASE}{permalink}",
        created_at=from_epoch_seconds(payload["created_utc"]),
        is_self_post=bool(payload.get("is_self", False)),
        body_text=_optional_text(payload, "selftext"),
        thumbnail=_optional_text(payload, "thumbnail"),
        domain=_optional_text(payload, "domain") or extract_domain_from_url(url),
    )


def parse_listing(listing: Any, source: str) -> List[Post]:
    """
    Normalize every child of a listing, skipping the ones that cannot be used.

    Children without a payload are skipped silently; children whose payload is
    malformed are logged and skipped. Neither aborts the batch.

    Args:
        listing: Decoded listing JSON ({"data": {"children": [...]}})
        source: Canonical identifier the listing was fetched for

    Returns:
        Posts in listing order
    """
    data = listing.get("data") if isinstance(listing, dict) else None
    children = data.get("children") if isinstance(data, dict) else None
    if not isinstance(children, list):
        return []

    logger.debug("r/%s: %d listing items", source, len(children))

    posts: List[Post] = []
    for child in children:
        payload = child.get("data") if isinstance(child, dict) else None
        if not payload:
            continue
        try:
            posts.append(normalize_post(payload, source))
        except (KeyError, TypeError, ValueError, AttributeError, OverflowError, OSError) as e:
            logger.warning("Error parsing post in r/%s: %s: %s", source, type(e).__name__, e)
            continue

    return posts


class RedditFetcher:
    """Fetches one page of a subreddit listing."""

    def __init__(self, config: FetcherConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    async def fetch_listing(self, identifier: str, limit: int) -> Any:
        """
        Fetch the raw listing JSON for a canonical identifier.

        Args:
            identifier: Canonical subreddit name
            limit: Page size hint passed upstream

        Returns:
            Decoded JSON body of a 200 response

        Raises:
            UpstreamHTTPError: upstream answered with a non-200 status
            MalformedResponseError: 200 response whose body is not JSON
            TimeoutError / httpx.TimeoutException: deadline exceeded
            httpx.HTTPError: transport-level failure
        """
        url = listing_url(self.config, identifier)
        logger.debug("Reddit URL: %s?limit=%s", url, limit)
        # The outer deadline bounds the whole exchange; httpx's own timeout
        # is per phase.
        return await asyncio.wait_for(self._get(url, limit), timeout=self.config.timeout)

    async def _get(self, url: str, limit: int) -> Any:
        async with httpx.AsyncClient(
            headers=dict(self.config.headers),
            timeout=self.config.timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            r = await client.get(url, params={"limit": limit})

        logger.debug("Reddit response status: %s", r.status_code)
        if r.status_code != 200:
            raise UpstreamHTTPError(r.status_code, r.text, url=str(r.url))

        try:
            return r.json()
        except ValueError as e:
            raise MalformedResponseError(f"Reddit returned a non-JSON body: {e}") from e

    async def fetch(self, identifier: str, limit: int) -> List[Post]:
        listing = await self.fetch_listing(identifier, limit)
        return parse_listing(listing, identifier)
