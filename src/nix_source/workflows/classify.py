"""Decide whether a source is a single file or an archive to unpack."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Optional

from ..core.models import SourceType
from .source_config import ARCHIVE_EXTENSIONS, COMPOUND_ARCHIVE_EXTENSIONS


def _extension(name: str) -> str:
    return PurePosixPath(name).suffix[1:]


def _stem(name: str) -> str:
    return PurePosixPath(name).stem


def infer_source_type(filename: Optional[str]) -> SourceType:
    """Infer the type from a filename hint.

    ``pkg.zip``, ``pkg.tgz`` and ``pkg.tar`` are archives, as is any compound
    ``pkg.tar.<ext>``. Everything else, including a missing hint, is a file.
    Matching is exact, so ``PKG.ZIP`` is a file.
    """

    if not filename:
        return SourceType.FILE
    if _extension(filename) in ARCHIVE_EXTENSIONS:
        return SourceType.ARCHIVE
    if _extension(_stem(filename)) in COMPOUND_ARCHIVE_EXTENSIONS:
        return SourceType.ARCHIVE
    return SourceType.FILE


def classify(explicit: Optional[SourceType], filename: Optional[str]) -> SourceType:
    """Return ``explicit`` when set, otherwise infer from ``filename``."""

    if explicit is not None:
        return explicit
    return infer_source_type(filename)


__all__ = ["classify", "infer_source_type"]
