"""Include search paths handed to the compiler."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterable, Iterator
from pathlib import Path

from sassinline.model.unit import CompileUnit

logger = logging.getLogger(__name__)


class LibraryPaths:
    """Ordered, de-duplicated set of include directories.

    Insertion order is preserved because it decides the compiler's search
    precedence. Entries are only ever appended.
    """

    def __init__(self, paths: Iterable[str | Path] = ()) -> None:
        self._paths: list[str] = []
        self._lock = threading.Lock()
        self.add(paths)

    def add(self, *values: str | Path | Iterable) -> None:
        """Add paths, or (nested) iterables of paths, skipping duplicates."""
        for value in values:
            if isinstance(value, (str, Path)):
                self._add_one(str(value))
            elif isinstance(value, Iterable):
                self.add(*value)

    def observe(self, unit: CompileUnit) -> CompileUnit:
        """Infer a library path from the unit's base directory."""
        self._add_one(unit.base)
        return unit

    def _add_one(self, path: str) -> None:
        if not path:
            return
        with self._lock:
            if path in self._paths:
                return
            self._paths.append(path)
        if not os.path.isdir(path):
            logger.debug("library path %s does not exist; it will never match", path)
        else:
            logger.debug("library path added: %s", path)

    def as_list(self) -> list[str]:
        with self._lock:
            return list(self._paths)

    def __iter__(self) -> Iterator[str]:
        return iter(self.as_list())

    def __len__(self) -> int:
        with self._lock:
            return len(self._paths)

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._paths
