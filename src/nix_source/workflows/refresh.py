"""Refresh one recorded source: probe, classify, re-hash."""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..core.models import Source
from .classify import classify
from .oracles import ConvertOracle, FetchOracle, acquire_hash
from .probe import Unchanged, probe

logger = logging.getLogger(__name__)


def refresh_source(
    source: Source,
    *,
    session: Optional[Any] = None,
    fetch_oracle: Optional[FetchOracle] = None,
    convert_oracle: Optional[ConvertOracle] = None,
    timeout: Optional[int] = None,
) -> Source:
    """Return ``source`` itself when unchanged, else a freshly hashed record.

    The new record replaces hash, validators and type together; ``source`` is
    never modified, so a failure at any stage leaves the caller's copy intact.
    """

    result = probe(source, session=session, timeout=timeout)
    if isinstance(result, Unchanged):
        return source

    source_type = classify(source.type, result.filename)
    logger.debug("\tfetching %s as %s", source.url, source_type.value)
    integrity = acquire_hash(
        source.url,
        source_type,
        result.filename,
        fetch_oracle=fetch_oracle,
        convert_oracle=convert_oracle,
    )
    return Source(
        url=source.url,
        hash=integrity,
        last_modified=result.last_modified,
        etag=result.etag,
        type=source_type,
    )


__all__ = ["refresh_source"]
