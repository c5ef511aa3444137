"""
Upstream failure types and their classification into client-facing errors.

The fetcher raises (or lets ``httpx`` raise) one of a handful of exception
types; ``classify_error`` maps any of them onto the small error taxonomy that
both the single-source and multi-source endpoints report. Classification is
pure: it never logs, retries or touches the network.
"""
from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from feedproxy.models import ErrorClass


BLOCKED_PHRASES = (
    "blocked by network security",
    "You've been blocked",
    "rate limit",
)

BLOCKED_CODE = "REDDIT_BLOCKED"
BLOCKED_MESSAGE = "Reddit is blocking requests from this server. This is a temporary issue."
BLOCKED_DETAILS = (
    "Reddit has implemented additional security measures that are blocking "
    "serverless function requests."
)
UPSTREAM_CODE = "Reddit API error"
TIMEOUT_CODE = "Timeout"
TIMEOUT_MESSAGE = "Request to Reddit API timed out"
INTERNAL_CODE = "Server error"
INVALID_REQUEST_CODE = "Invalid request"


class UpstreamHTTPError(Exception):
    """Upstream answered with a status other than 200."""

    def __init__(self, status_code: int, body: str = "", url: str = ""):
        super().__init__(f"Reddit API returned status {status_code}")
        self.status_code = status_code
        self.body = body
        self.url = url


class MalformedResponseError(Exception):
    """Upstream answered 200 but the body is not a JSON listing."""


@dataclass(frozen=True)
class ClassifiedError:
    classification: ErrorClass
    status_code: int
    error: str
    message: str
    details: Any = None

    def to_body(self) -> dict:
        body = {"success": False, "error": self.error, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


def _response_of(exc: BaseException) -> Optional[tuple[int, str]]:
    """Extract ``(status, body text)`` when the failure carries an HTTP response."""
    if isinstance(exc, UpstreamHTTPError):
        return exc.status_code, exc.body or ""
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            text = exc.response.text
        except (httpx.ResponseNotRead, UnicodeDecodeError):
            text = ""
        return exc.response.status_code, text
    return None


def _details_from_body(body: str) -> Any:
    if not body:
        return ""
    try:
        return json.loads(body)
    except ValueError:
        return body


def is_blocked(status_code: int, body: str) -> bool:
    if status_code == 429:
        return True
    return any(phrase in body for phrase in BLOCKED_PHRASES)


def classify_error(exc: BaseException) -> ClassifiedError:
    """
    Map a fetch failure onto the client-facing error taxonomy.

    Order matters: blocking is checked before generic upstream errors, and
    both before timeouts.

    Args:
        exc: Exception raised while fetching one source

    Returns:
        ClassifiedError with classification, HTTP status and response fields
    """
    response = _response_of(exc)
    if response is not None:
        status_code, body = response
        if is_blocked(status_code, body):
            return ClassifiedError(
                classification=ErrorClass.BLOCKED,
                status_code=429,
                error=BLOCKED_CODE,
                message=BLOCKED_MESSAGE,
                details=BLOCKED_DETAILS,
            )
        return ClassifiedError(
            classification=ErrorClass.UPSTREAM_ERROR,
            # A non-error upstream status (e.g. 204) is still a failed fetch.
            status_code=status_code if status_code >= 400 else 502,
            error=UPSTREAM_CODE,
            message=f"Reddit API error: {status_code}",
            details=_details_from_body(body),
        )

    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return ClassifiedError(
            classification=ErrorClass.TIMEOUT,
            status_code=408,
            error=TIMEOUT_CODE,
            message=TIMEOUT_MESSAGE,
        )

    return ClassifiedError(
        classification=ErrorClass.INTERNAL,
        status_code=500,
        error=INTERNAL_CODE,
        message=str(exc) or type(exc).__name__,
    )


def invalid_request(message: str) -> ClassifiedError:
    return ClassifiedError(
        classification=ErrorClass.INVALID_REQUEST,
        status_code=400,
        error=INVALID_REQUEST_CODE,
        message=message,
    )


__all__ = [
    "BLOCKED_PHRASES",
    "ClassifiedError",
    "MalformedResponseError",
    "UpstreamHTTPError",
    "classify_error",
    "invalid_request",
    "is_blocked",
]
