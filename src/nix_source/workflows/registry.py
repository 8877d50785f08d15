"""In-memory view of the sources.json registry file.

The file is read once, mutated in memory and rewritten in full by
:meth:`Registry.save`. Nothing guards against another process editing the
file during a run.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..core.keys import K_SOURCES
from ..core.models import Source
from ..errors import DuplicateSourceError, MalformedHashError, MissingSourceError, RegistryError

logger = logging.getLogger(__name__)


def _parse_document(path: Path, text: str) -> Dict[str, Source]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RegistryError(f"{path}: invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise RegistryError(f"{path}: expected a JSON object")
    raw_sources = data.get(K_SOURCES) or {}
    if not isinstance(raw_sources, dict):
        raise RegistryError(f"{path}: '{K_SOURCES}' must be an object")
    sources: Dict[str, Source] = {}
    for name, record in raw_sources.items():
        try:
            sources[name] = Source.from_dict(record)
        except (ValueError, MalformedHashError) as exc:
            raise RegistryError(f"{path}: invalid source {name}: {exc}") from exc
    return sources


class Registry:
    """Named sources backed by a JSON file."""

    def __init__(self, path: Path, sources: Optional[Dict[str, Source]] = None) -> None:
        self.path = path
        self._sources: Dict[str, Source] = dict(sources or {})

    @classmethod
    def load(cls, path: Path, *, create: bool = False) -> "Registry":
        """Read ``path``; with ``create`` a missing file is initialised to ``{}``."""

        if not path.exists():
            if not create:
                raise RegistryError(f"sources file {path} does not exist")
            # keep the file valid JSON even if the command fails later
            path.write_text("{}", encoding="utf-8")
            return cls(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise RegistryError(f"cannot read {path}: {exc}") from exc
        return cls(path, _parse_document(path, text))

    def __contains__(self, name: object) -> bool:
        return name in self._sources

    def __len__(self) -> int:
        return len(self._sources)

    def names(self) -> List[str]:
        return list(self._sources)

    def items(self) -> Iterator[Tuple[str, Source]]:
        return iter(list(self._sources.items()))

    def get(self, name: str) -> Source:
        try:
            return self._sources[name]
        except KeyError:
            raise MissingSourceError(name) from None

    def add(self, name: str, source: Source) -> None:
        if name in self._sources:
            raise DuplicateSourceError(name)
        self._sources[name] = source

    def replace(self, name: str, source: Source) -> None:
        if name not in self._sources:
            raise MissingSourceError(name)
        self._sources[name] = source

    def remove(self, name: str) -> Source:
        try:
            return self._sources.pop(name)
        except KeyError:
            raise MissingSourceError(name) from None

    def to_dict(self) -> Dict[str, Any]:
        return {K_SOURCES: {name: source.to_dict() for name, source in self._sources.items()}}

    def save(self) -> None:
        """Truncate and rewrite the registry file."""

        payload = json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"
        try:
            self.path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise RegistryError(f"cannot write {self.path}: {exc}") from exc
        logger.debug("wrote %d source(s) to %s", len(self._sources), self.path)


__all__ = ["Registry"]
