"""HEAD revalidation of a recorded source.

A probe sends conditional headers built from the cached validators and
reports whether the remote resource must be fetched again. Only a 304
response counts as unchanged; every other successful response is treated as
a change, even when the returned validators match the cached ones.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Union

import requests

from ..core.models import Source
from ..errors import TransportError
from .source_config import (
    HDR_CONTENT_DISPOSITION,
    HDR_ETAG,
    HDR_IF_MODIFIED_SINCE,
    HDR_IF_NONE_MATCH,
    HDR_LAST_MODIFIED,
    HDR_USER_AGENT,
    STATUS_NOT_MODIFIED,
    USER_AGENT,
    WEAK_ETAG_PREFIX,
)
from .source_utils import (
    content_disposition_filename,
    format_http_date,
    parse_http_date,
    resolve_http_timeout,
    url_filename,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Unchanged:
    """The server answered 304 for the cached validators."""


@dataclass(frozen=True)
class Changed:
    """Fresh validators and the filename hint taken from a non-304 response."""

    etag: Optional[str] = None
    last_modified: Optional[datetime] = None
    filename: Optional[str] = None


ProbeResult = Union[Unchanged, Changed]


def conditional_headers(source: Source) -> Dict[str, str]:
    """Return precondition headers for ``source``.

    A source without a cached hash has never been fetched, so it is never
    revalidated regardless of any validators it carries.
    """

    if not source.has_hash:
        return {}
    headers: Dict[str, str] = {}
    if source.etag:
        headers[HDR_IF_NONE_MATCH] = source.etag
    if source.last_modified is not None:
        headers[HDR_IF_MODIFIED_SINCE] = format_http_date(source.last_modified)
    return headers


def strong_etag(value: Optional[str]) -> Optional[str]:
    if not value or value.startswith(WEAK_ETAG_PREFIX):
        return None
    return value


def _changed_from_response(source: Source, resp: requests.Response) -> Changed:
    headers = resp.headers
    filename = content_disposition_filename(headers.get(HDR_CONTENT_DISPOSITION)) or url_filename(source.url)
    return Changed(
        etag=strong_etag(headers.get(HDR_ETAG)),
        last_modified=parse_http_date(headers.get(HDR_LAST_MODIFIED)),
        filename=filename,
    )


def probe(
    source: Source,
    *,
    session: Optional[Any] = None,
    timeout: Optional[int] = None,
) -> ProbeResult:
    """Issue a HEAD request for ``source.url`` and classify the response.

    ``session`` may be a :class:`requests.Session` or anything exposing a
    compatible ``head`` method; the :mod:`requests` module is used otherwise.
    Any transport failure or error status raises :class:`TransportError`.
    """

    client = session or requests
    headers = {HDR_USER_AGENT: USER_AGENT, **conditional_headers(source)}
    try:
        resp = client.head(
            source.url,
            headers=headers,
            allow_redirects=True,
            timeout=timeout or resolve_http_timeout(),
        )
        if resp.status_code == STATUS_NOT_MODIFIED:
            logger.info("\tnot modified")
            return Unchanged()
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise TransportError(source.url, exc) from exc

    changed = _changed_from_response(source, resp)
    logger.info(
        "\tlast-modified=%s etag=%s filename=%s",
        changed.last_modified.isoformat() if changed.last_modified else None,
        changed.etag,
        changed.filename,
    )
    return changed


__all__ = [
    "Changed",
    "ProbeResult",
    "Unchanged",
    "conditional_headers",
    "probe",
    "strong_etag",
]
