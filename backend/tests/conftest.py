"""
Shared pytest fixtures: listing payload builders and an app client whose
fetcher talks to an in-process mock transport instead of Reddit.
"""

from datetime import datetime, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from feedproxy.config import FetcherConfig
from feedproxy.main import app, get_fetcher
from feedproxy.sources.reddit import RedditFetcher


FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_payload(post_id, title="A post", score=1, created_utc=None, **extra):
    """Reddit-shaped post payload (the `data` of a listing child)."""
    if created_utc is None:
        created_utc = datetime.now(timezone.utc).timestamp() - 60
    payload = {
        "id": post_id,
        "title": title,
        "author": "someone",
        "subreddit": "SaaS",
        "score": score,
        "num_comments": 3,
        "url": f"https://example.com/{post_id}",
        "permalink": f"/r/SaaS/comments/{post_id}/a_post/",
        "created_utc": created_utc,
        "is_self": False,
        "selftext": "",
        "thumbnail": "default",
        "domain": "example.com",
    }
    payload.update(extra)
    return payload


def make_listing(*payloads):
    return {"kind": "Listing", "data": {"children": [{"kind": "t3", "data": p} for p in payloads]}}


def route_by_source(responses):
    """
    Build a mock transport handler that answers per subreddit.

    `responses` maps a canonical name to either a listing dict (200 JSON),
    an httpx.Response, or an exception instance to raise.
    """

    def handler(request):
        name = request.url.path.split("/r/", 1)[-1].removesuffix(".json")
        answer = responses.get(name)
        if answer is None:
            return httpx.Response(404, json={"message": "Not Found", "error": 404})
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json=answer)

    return handler


def make_fetcher(handler):
    return RedditFetcher(FetcherConfig(), transport=httpx.MockTransport(handler))


@pytest.fixture
def make_client():
    """Return a factory producing a TestClient wired to a mock upstream."""

    def _make(handler):
        fetcher = make_fetcher(handler)
        app.dependency_overrides[get_fetcher] = lambda: fetcher
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
