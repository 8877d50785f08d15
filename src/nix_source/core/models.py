"""Source records as stored in sources.json."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..errors import MalformedHashError
from .keys import K_ETAG, K_HASH, K_LAST_MODIFIED, K_TYPE, K_URL

# Digest sizes in bytes for the algorithms an SRI string may name.
_SRI_DIGEST_SIZES = {
    "sha1": 20,
    "sha256": 32,
    "sha384": 48,
    "sha512": 64,
}


class SourceType(str, Enum):
    """How a source is materialized: as-is, or unpacked before hashing."""

    FILE = "file"
    ARCHIVE = "tarball"

    @classmethod
    def parse(cls, value: str) -> "SourceType":
        for member in cls:
            if member.value == value:
                return member
        raise ValueError(f"invalid source type: {value!r}")


@dataclass(frozen=True)
class Integrity:
    """A parsed subresource-integrity string.

    The text is kept verbatim so a record round-trips byte for byte; ``hashes``
    holds the ``(algorithm, base64 digest)`` pairs it was validated against.
    """

    value: str
    hashes: Tuple[Tuple[str, str], ...] = field(compare=False)

    @classmethod
    def parse(cls, text: str) -> "Integrity":
        raw = (text or "").strip()
        if not raw:
            raise MalformedHashError("empty integrity string")
        hashes = []
        for entry in raw.split():
            token = entry.split("?", 1)[0]
            algorithm, sep, digest = token.partition("-")
            size = _SRI_DIGEST_SIZES.get(algorithm)
            if not sep or size is None:
                raise MalformedHashError(f"unsupported integrity entry: {entry!r}")
            try:
                decoded = base64.b64decode(digest, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise MalformedHashError(f"invalid base64 digest in {entry!r}") from exc
            if len(decoded) != size:
                raise MalformedHashError(
                    f"{algorithm} digest must be {size} bytes, got {len(decoded)} in {entry!r}"
                )
            hashes.append((algorithm, digest))
        return cls(value=raw, hashes=tuple(hashes))

    @property
    def algorithm(self) -> str:
        return self.hashes[0][0]

    def __str__(self) -> str:
        return self.value


def _parse_timestamp(raw: str) -> datetime:
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        raise ValueError(f"timestamp without UTC offset: {raw!r}")
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class Source:
    """One remote artifact tracked by the registry.

    ``hash``, ``last_modified``, ``etag`` and ``type`` only ever change together,
    by replacing the whole record with the result of a refresh.
    """

    url: str
    hash: Optional[Integrity] = None
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None
    type: Optional[SourceType] = None

    @classmethod
    def new(cls, url: str, source_type: Optional[SourceType] = None) -> "Source":
        return cls(url=url, type=source_type)

    @property
    def has_hash(self) -> bool:
        return self.hash is not None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.hash is not None:
            payload[K_HASH] = str(self.hash)
        payload[K_URL] = self.url
        if self.last_modified is not None:
            payload[K_LAST_MODIFIED] = self.last_modified.isoformat()
        if self.etag is not None:
            payload[K_ETAG] = self.etag
        if self.type is not None:
            payload[K_TYPE] = self.type.value
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Source":
        if not isinstance(data, dict):
            raise ValueError("source record must be an object")
        url = data.get(K_URL)
        if not isinstance(url, str) or not url:
            raise ValueError("source record is missing a url")
        raw_hash = data.get(K_HASH)
        raw_modified = data.get(K_LAST_MODIFIED)
        raw_type = data.get(K_TYPE)
        etag = data.get(K_ETAG)
        for key, value in ((K_HASH, raw_hash), (K_LAST_MODIFIED, raw_modified), (K_ETAG, etag), (K_TYPE, raw_type)):
            if value is not None and not isinstance(value, str):
                raise ValueError(f"{key} must be a string")
        if raw_hash is not None and raw_type is None:
            raise ValueError(f"a record with a {K_HASH} must also have a {K_TYPE}")
        return cls(
            url=url,
            hash=Integrity.parse(raw_hash) if raw_hash is not None else None,
            last_modified=_parse_timestamp(raw_modified) if raw_modified is not None else None,
            etag=etag,
            type=SourceType.parse(raw_type) if raw_type is not None else None,
        )


__all__ = ["Integrity", "Source", "SourceType"]
