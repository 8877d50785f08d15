"""Shared schema keys for the sources.json registry file."""

from __future__ import annotations

# Registry document keys
K_SOURCES = "sources"

# Source record keys
K_HASH = "hash"
K_URL = "url"
K_LAST_MODIFIED = "last-modified"
K_ETAG = "etag"
K_TYPE = "type"

RECORD_KEYS = (K_HASH, K_URL, K_LAST_MODIFIED, K_ETAG, K_TYPE)
