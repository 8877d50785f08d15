"""High-level exports for the source refresh workflows."""

# probe and classify stay submodule attributes; import the functions from them.

from .classify import infer_source_type
from .oracles import acquire_hash, hash_to_sri, prefetch_url, trim_trailing_newline
from .probe import Changed, Unchanged, conditional_headers
from .refresh import refresh_source
from .registry import Registry
from .source_utils import sanitize_store_name

__all__ = [
    "Changed",
    "Registry",
    "Unchanged",
    "acquire_hash",
    "conditional_headers",
    "hash_to_sri",
    "infer_source_type",
    "prefetch_url",
    "refresh_source",
    "sanitize_store_name",
    "trim_trailing_newline",
]
