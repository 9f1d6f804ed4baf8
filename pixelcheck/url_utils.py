"""Shared URL utilities — validate target URLs and derive stable report names."""

from __future__ import annotations

import hashlib
import re
from urllib.parse import urlparse

from pixelcheck.errors import InvalidInputError


def validate_url(url: str | None) -> str:
    """Return the stripped URL, or raise if it is missing or not http(s)."""
    url = (url or "").strip()
    if not url:
        raise InvalidInputError("URL is required")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidInputError(f"Invalid URL: {url}")
    return url


def report_name_from_url(url: str) -> str:
    """Filesystem-safe name: host slug plus a short hash of the full URL."""
    host = re.sub(r"[^a-zA-Z0-9]+", "-", urlparse(url).netloc).strip("-") or "page"
    return f"{host}_{hashlib.md5(url.encode()).hexdigest()[:8]}"
