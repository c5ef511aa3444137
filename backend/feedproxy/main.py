"""
Main FastAPI application and routing layer.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Path, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from feedproxy.config import FetcherConfig, settings
from feedproxy.core.errors import ClassifiedError, invalid_request
from feedproxy.core.filters import build_criteria
from feedproxy.schemas import (
    ErrorResponse,
    FiltersOut,
    MultiSourceRequest,
    MultiSourceResponse,
    PostOut,
    SourceResponse,
)
from feedproxy.sources.collector import collect_posts, fetch_source
from feedproxy.sources.reddit import RedditFetcher

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=settings.LOG_FORMAT)
logger = logging.getLogger("uvicorn")

SOURCES_REQUIRED = "sources array is required"

# Built once per process; handlers receive it through get_fetcher.
fetcher_config = FetcherConfig()
_fetcher = RedditFetcher(fetcher_config)


def get_fetcher() -> RedditFetcher:
    return _fetcher


def error_response(error: ClassifiedError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_body())


router = APIRouter()


@router.post(
    "/multiple",
    response_model=MultiSourceResponse,
    responses={400: {"model": ErrorResponse}},
)
async def get_multiple_sources(
    body: Optional[MultiSourceRequest] = None,
    fetcher: RedditFetcher = Depends(get_fetcher),
):
    """
    Fetch, filter and merge posts from several subreddits.

    Per-source failures are reported in ``errors`` and do not fail the request.
    """
    sources = None
    if body is not None:
        sources = body.sources if body.sources is not None else body.subreddits

    if (
        not isinstance(sources, list)
        or not sources
        or not all(isinstance(source, str) for source in sources)
    ):
        return error_response(invalid_request(SOURCES_REQUIRED))

    criteria = build_criteria(body.keywords, body.hours, body.limit)
    logger.info("Fetching posts from %d subreddits: %s", len(sources), ", ".join(sources))
    logger.info("Keywords: %s", ",".join(criteria.keywords))

    result = await collect_posts(fetcher, sources, criteria)
    return MultiSourceResponse.from_result(sources, result, body.keywords)


@router.get(
    "/{identifier:path}",
    response_model=SourceResponse,
    responses={
        408: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_source(
    identifier: str = Path(..., description="Subreddit name, r/ name or listing URL"),
    limit: int = Query(settings.DEFAULT_LIMIT, ge=1, le=100, description="Upstream page size"),
    hours: float = Query(settings.DEFAULT_HOURS, ge=0, allow_inf_nan=False, description="Maximum post age in hours"),
    keywords: str = Query("", description="Comma-separated keywords (any match)"),
    fetcher: RedditFetcher = Depends(get_fetcher),
):
    """
    Fetch one page of a subreddit listing and return the filtered posts.
    """
    logger.info("Fetching posts from r/%s", identifier)
    logger.info("Limit: %s, Hours: %s, Keywords: %s", limit, hours, keywords)

    criteria = build_criteria(keywords, hours, limit)
    outcome = await fetch_source(fetcher, identifier, criteria)

    if outcome.error is not None:
        error = outcome.error
        return error_response(
            ClassifiedError(
                classification=error.classification,
                status_code=error.status_code,
                error=error.error_code,
                message=error.message,
                details=error.details,
            )
        )

    logger.info("Returning %d filtered posts", len(outcome.posts))
    return SourceResponse(
        posts=[PostOut.from_post(post) for post in outcome.posts],
        total=len(outcome.posts),
        source=outcome.identifier,
        filters=FiltersOut.from_criteria(criteria, keywords),
    )


# Initialize FastAPI app
app = FastAPI(
    title="Reddit Feed Proxy API",
    version="0.1.0",
    description="Fetches, filters and merges subreddit listings for browser clients",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"{location}: {first.get('msg', 'invalid value')}" if location else "Malformed request"
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, message)
    return error_response(invalid_request(message))


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "OK", "message": "Reddit Backend API is running"}


app.include_router(router, prefix="/api/source", tags=["source"])
# Legacy path kept for existing clients.
app.include_router(router, prefix="/api/reddit", tags=["source"])


if __name__ == "__main__":
    # For development
    import uvicorn
    uvicorn.run("feedproxy.main:app", host="0.0.0.0", port=settings.PORT, reload=True)
