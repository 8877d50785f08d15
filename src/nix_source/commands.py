"""add / update / rm against the sources file.

Each command loads the registry once and saves it at most once, after every
refresh has succeeded. A failure part-way through a batch propagates before
the save, so the file on disk is left as it was.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import requests

from .core.models import Source, SourceType
from .errors import DuplicateSourceError
from .workflows.refresh import refresh_source
from .workflows.registry import Registry

logger = logging.getLogger(__name__)

RefreshFunc = Callable[[Source], Source]


def _default_refresh(session: requests.Session) -> RefreshFunc:
    return lambda source: refresh_source(source, session=session)


def add_source(
    path: Path,
    name: str,
    url: str,
    *,
    source_type: Optional[SourceType] = None,
    refresh: Optional[RefreshFunc] = None,
) -> Source:
    """Register ``url`` under ``name`` and record its first hash."""

    registry = Registry.load(path, create=True)
    if name in registry:
        raise DuplicateSourceError(name)
    logger.info("Adding %s", name)
    with requests.Session() as session:
        refresher = refresh or _default_refresh(session)
        source = refresher(Source.new(url, source_type))
    registry.add(name, source)
    registry.save()
    return source


def update_sources(
    path: Path,
    name: Optional[str] = None,
    *,
    refresh: Optional[RefreshFunc] = None,
) -> List[Tuple[str, Source]]:
    """Refresh ``name``, or every source in file order when ``name`` is None."""

    registry = Registry.load(path)
    if name is not None:
        targets = [(name, registry.get(name))]
    else:
        targets = list(registry.items())

    updated: List[Tuple[str, Source]] = []
    with requests.Session() as session:
        refresher = refresh or _default_refresh(session)
        for target_name, source in targets:
            logger.info("Updating %s", target_name)
            updated.append((target_name, refresher(source)))

    for target_name, source in updated:
        registry.replace(target_name, source)
    registry.save()
    return updated


def remove_source(path: Path, name: str) -> Source:
    registry = Registry.load(path)
    removed = registry.remove(name)
    registry.save()
    logger.info("Removed %s", name)
    return removed


__all__ = ["RefreshFunc", "add_source", "remove_source", "update_sources"]
