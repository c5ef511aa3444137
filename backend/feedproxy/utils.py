"""
Shared utility functions for the feed proxy.
"""
from __future__ import annotations

from datetime import datetime, timezone
from urllib.parse import urlparse

import tldextract


# Bundled public suffix snapshot only; no network lookups at runtime.
_extract = tldextract.TLDExtract(suffix_list_urls=())


def now_utc() -> datetime:
    """
    Get current UTC datetime with timezone information.

    Returns:
        Current UTC datetime
    """
    return datetime.now(timezone.utc)


def from_epoch_seconds(value: float | int | str) -> datetime:
    """Convert an epoch-seconds value to an aware UTC datetime."""
    return datetime.fromtimestamp(float(value), tz=timezone.utc)


def extract_domain_from_url(url: str) -> str:
    """
    Extract the registered domain from a URL.

    Args:
        url: Full URL string

    Returns:
        Normalized domain name in lowercase, empty string for empty input
    """
    if not url:
        return ""
    extracted = _extract(url)
    if extracted.domain:
        domain = f"{extracted.domain}.{extracted.suffix}" if extracted.suffix else extracted.domain
        return domain.lower()
    return urlparse(url).netloc.lower()
