"""
File: feedproxy/models.py
Internal data structures shared by the fetch/filter/merge pipeline.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple


JsonDict = Dict[str, Any]


class ErrorClass(str, enum.Enum):
    BLOCKED = "BLOCKED"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    TIMEOUT = "TIMEOUT"
    INVALID_REQUEST = "INVALID_REQUEST"
    ITEM_PARSE_FAILURE = "ITEM_PARSE_FAILURE"
    INTERNAL = "INTERNAL"


def to_iso(dt: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class Post:
    """Normalized listing post. Built once from one upstream item."""

    id: str
    title: str
    author: str
    source: str  # canonical identifier the post was fetched from
    score: int
    comment_count: int
    url: str
    permalink: str
    created_at: datetime
    is_self_post: bool
    body_text: str = ""
    thumbnail: str = ""
    domain: str = ""


@dataclass(frozen=True)
class FilterCriteria:
    keywords: Tuple[str, ...] = ()
    max_age_hours: Optional[float] = None  # None disables the recency filter
    limit: int = 25


@dataclass(frozen=True)
class FetchError:
    source: str  # identifier as given by the caller
    classification: ErrorClass
    message: str
    status_code: int = 500
    error_code: str = "Server error"
    details: Any = None


@dataclass(frozen=True)
class FetchOutcome:
    """Result for one requested source: posts on success, error otherwise."""

    source: str
    identifier: str = ""  # canonical form of source
    posts: List[Post] = field(default_factory=list)
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class AggregatedResult:
    posts: List[Post]
    errors: List[FetchError]
    criteria: FilterCriteria


__all__ = [
    "AggregatedResult",
    "ErrorClass",
    "FetchError",
    "FetchOutcome",
    "FilterCriteria",
    "JsonDict",
    "Post",
    "to_iso",
]
