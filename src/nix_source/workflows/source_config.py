"""nix-source defaults (headers, oracle commands, paths, environment knobs).

Centralizes static defaults so the probe and the hash pipeline have no
embedded magic strings. Environment variables override the values resolved
at call time; callers can also pass explicit arguments.
"""

from __future__ import annotations

from pathlib import Path

from .. import __version__

# Request / response headers
HDR_ETAG = "ETag"
HDR_LAST_MODIFIED = "Last-Modified"
HDR_CONTENT_DISPOSITION = "Content-Disposition"
HDR_IF_NONE_MATCH = "If-None-Match"
HDR_IF_MODIFIED_SINCE = "If-Modified-Since"
HDR_USER_AGENT = "User-Agent"

USER_AGENT = f"nix-source/{__version__}"
STATUS_NOT_MODIFIED = 304
WEAK_ETAG_PREFIX = "W/"

# Oracles
PREFETCH_BIN = "nix-prefetch-url"
NIX_BIN = "nix"
SRI_HASH_TYPE = "sha256"

# Store naming
FALLBACK_STORE_NAME = "source"
ARCHIVE_EXTENSIONS = {"zip", "tgz", "tar"}
COMPOUND_ARCHIVE_EXTENSIONS = {"tar"}

# Paths / env
DEFAULT_SOURCES_PATH = Path("sources.json")
DEFAULT_HTTP_TIMEOUT = 30

ENV_SOURCES_PATH = "NIX_SOURCE_SOURCES_PATH"
ENV_HTTP_TIMEOUT = "NIX_SOURCE_HTTP_TIMEOUT"
ENV_PREFETCH_BIN = "NIX_SOURCE_PREFETCH_BIN"
ENV_NIX_BIN = "NIX_SOURCE_NIX_BIN"
ENV_LOG_LEVEL = "NIX_SOURCE_LOG_LEVEL"
