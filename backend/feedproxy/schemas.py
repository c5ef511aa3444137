# feedproxy/schemas.py
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field

from feedproxy.config import settings
from feedproxy.models import AggregatedResult, FetchError, FilterCriteria, Post, to_iso


class PostOut(BaseModel):
    id: str
    title: str
    author: str
    source: str
    score: int
    commentCount: int
    url: str
    permalink: str
    createdAt: str                            # ISO-8601, UTC, "Z" suffix
    isSelfPost: bool
    bodyText: str = ""
    thumbnail: str = ""
    domain: str = ""

    @classmethod
    def from_post(cls, post: Post) -> "PostOut":
        return cls(
            id=post.id,
            title=post.title,
            author=post.author,
            source=post.source,
            score=post.score,
            commentCount=post.comment_count,
            url=post.url,
            permalink=post.permalink,
            createdAt=to_iso(post.created_at),
            isSelfPost=post.is_self_post,
            bodyText=post.body_text,
            thumbnail=post.thumbnail,
            domain=post.domain,
        )


class FiltersOut(BaseModel):
    limit: int
    hours: Union[int, float, None] = None
    keywords: str = ""

    @classmethod
    def from_criteria(cls, criteria: FilterCriteria, raw_keywords: Union[str, List[str], None] = None) -> "FiltersOut":
        if raw_keywords is None:
            keywords = ",".join(criteria.keywords)
        elif isinstance(raw_keywords, str):
            keywords = raw_keywords
        else:
            keywords = ",".join(str(k) for k in raw_keywords)
        hours = criteria.max_age_hours
        if hours is not None and float(hours).is_integer():
            hours = int(hours)
        return cls(limit=criteria.limit, hours=hours, keywords=keywords)


class SourceErrorOut(BaseModel):
    source: str
    error: str
    classification: str
    status: int

    @classmethod
    def from_error(cls, error: FetchError) -> "SourceErrorOut":
        return cls(
            source=error.source,
            error=error.message,
            classification=error.classification.value,
            status=error.status_code,
        )


class SourceResponse(BaseModel):
    success: bool = True
    posts: List[PostOut]
    total: int
    source: str
    filters: FiltersOut


class MultiSourceRequest(BaseModel):
    # sources is checked by the handler so a bad shape maps to a 400 body.
    sources: Any = None
    subreddits: Any = None                    # legacy key
    keywords: Union[str, List[str], None] = ""
    limit: int = Field(settings.DEFAULT_LIMIT, ge=1, le=100)
    hours: Optional[float] = Field(settings.DEFAULT_HOURS, ge=0, allow_inf_nan=False)


class MultiSourceResponse(BaseModel):
    success: bool = True
    posts: List[PostOut]
    total: int
    sources: List[str]
    errors: List[SourceErrorOut]
    filters: FiltersOut

    @classmethod
    def from_result(
        cls,
        sources: List[str],
        result: AggregatedResult,
        raw_keywords: Union[str, List[str], None] = None,
    ) -> "MultiSourceResponse":
        return cls(
            posts=[PostOut.from_post(post) for post in result.posts],
            total=len(result.posts),
            sources=sources,
            errors=[SourceErrorOut.from_error(error) for error in result.errors],
            filters=FiltersOut.from_criteria(result.criteria, raw_keywords),
        )


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str
    details: Optional[Any] = None
