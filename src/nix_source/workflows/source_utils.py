"""Shared helper functions used by the refresh workflow."""

from __future__ import annotations

import os
import re
from datetime import datetime, timedelta, timezone
from email.message import Message
from email.utils import format_datetime, parsedate_to_datetime
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from .source_config import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_SOURCES_PATH,
    ENV_HTTP_TIMEOUT,
    ENV_NIX_BIN,
    ENV_PREFETCH_BIN,
    ENV_SOURCES_PATH,
    FALLBACK_STORE_NAME,
    NIX_BIN,
    PREFETCH_BIN,
)

_STORE_NAME_DISALLOWED = re.compile(r"[^0-9A-Za-z+\-._?=]")


def _env_int(name: str, default: int = 0) -> int:
    try:
        raw = os.getenv(name, "")
        return int(raw) if raw.strip() else default
    except (TypeError, ValueError):
        return default


def _env_str(name: str, default: str) -> str:
    raw = (os.getenv(name) or "").strip()
    return raw or default


def resolve_sources_path(path: Optional[Path] = None) -> Path:
    if path is not None:
        return path
    return Path(_env_str(ENV_SOURCES_PATH, str(DEFAULT_SOURCES_PATH)))


def resolve_http_timeout() -> int:
    return max(1, _env_int(ENV_HTTP_TIMEOUT, DEFAULT_HTTP_TIMEOUT))


def resolve_prefetch_bin() -> str:
    return _env_str(ENV_PREFETCH_BIN, PREFETCH_BIN)


def resolve_nix_bin() -> str:
    return _env_str(ENV_NIX_BIN, NIX_BIN)


def validate_url(url: str) -> str:
    """Return ``url`` unchanged when it is absolute, else raise ValueError."""

    raw = (url or "").strip()
    parsed = urlparse(raw)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"not an absolute URL: {url!r}")
    return raw


def url_filename(url: str) -> Optional[str]:
    """Return the last path segment of ``url``, or None when it is empty."""

    segment = urlparse(url).path.rsplit("/", 1)[-1]
    return segment or None


def content_disposition_filename(header: Optional[str]) -> Optional[str]:
    """Extract the ``filename`` parameter from a Content-Disposition value."""

    if not header:
        return None
    msg = Message()
    msg["Content-Disposition"] = header
    filename = msg.get_filename()
    return filename or None


def format_http_date(value: datetime) -> str:
    """Format a UTC timestamp as an RFC 2822 date ending in ``GMT``.

    Cached timestamps are always stored in UTC; anything else is a bug.
    """

    assert value.utcoffset() == timedelta(0), f"non-UTC timestamp: {value.isoformat()}"
    return format_datetime(value.replace(tzinfo=timezone.utc), usegmt=True)


def parse_http_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 2822 date into UTC; unparsable input yields None."""

    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        # "-0000" means UTC with unknown local offset
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def sanitize_store_name(name: Optional[str]) -> str:
    """Map a filename hint onto characters the store accepts.

    A leading ``.`` becomes ``_`` so the name never looks hidden; any other
    character outside ``[0-9A-Za-z+-._?=]`` becomes ``_``. Empty input falls
    back to a fixed name.
    """

    if not name:
        return FALLBACK_STORE_NAME
    head, tail = name[0], name[1:]
    head = "_" if head == "." else _STORE_NAME_DISALLOWED.sub("_", head)
    return head + _STORE_NAME_DISALLOWED.sub("_", tail)


def sanity_check() -> None:
    assert sanitize_store_name(".hidden") == "_hidden"
    assert sanitize_store_name("") == FALLBACK_STORE_NAME
    assert url_filename("https://example.com/a/pkg.tar.gz") == "pkg.tar.gz"
    assert url_filename("https://example.com/") is None
    assert content_disposition_filename('attachment; filename="x.zip"') == "x.zip"


sanity_check()

__all__ = [
    "resolve_sources_path",
    "resolve_http_timeout",
    "resolve_prefetch_bin",
    "resolve_nix_bin",
    "validate_url",
    "url_filename",
    "content_disposition_filename",
    "format_http_date",
    "parse_http_date",
    "sanitize_store_name",
    "sanity_check",
]
