"""Core schema helpers for nix-source."""

from .keys import *  # noqa: F401,F403 re-export stable keys
from .models import Integrity, Source, SourceType

__all__ = [name for name in globals() if name.startswith("K_")] + [
    "RECORD_KEYS",
    "Integrity",
    "Source",
    "SourceType",
]
