"""Relative asset resolver: find a referenced file near its authoring directory.

Stylesheets are often compiled from a different directory than the one their
assets sit in, and partials move around. A reference is first tried directly
under the starting directory; failing that, the search fans out into every
subdirectory and up into the parent, never stepping back into the directory it
just came from and never climbing to the invocation root.
"""

from __future__ import annotations

import logging
import os
import re
import threading
from pathlib import Path

from sassinline.inline.datauri import css_data_url, is_remote, media_type_for

logger = logging.getLogger(__name__)

_SUFFIX_RE = re.compile(r"[?#].*$", re.DOTALL)


class AssetResolver:
    """Resolve relative file references to ``url(data:...)`` values.

    Args:
        root: The invocation root. Once a directory's parent is *root*, the
            search stops widening.
        max_depth: Optional limit on recursive hops away from the start.
        max_bytes: Files larger than this are left referenced, not inlined.
    """

    def __init__(
        self,
        root: str | Path | None = None,
        *,
        max_depth: int | None = None,
        max_bytes: int | None = None,
    ) -> None:
        self.root = Path(os.path.abspath(root or os.getcwd()))
        self.max_depth = max_depth
        self.max_bytes = max_bytes
        self._cache: dict[tuple[Path, str, Path | None, int], str | None] = {}
        self._lock = threading.Lock()

    def clear(self) -> None:
        """Forget memoised lookups so changed assets are read again."""
        with self._lock:
            self._cache.clear()

    def resolve(
        self,
        start: str | Path,
        reference: str,
        exclude: str | Path | None = None,
    ) -> str | None:
        """Return ``url(data:<mime>;base64,<bytes>)`` for *reference*, or ``None``."""
        relative = _SUFFIX_RE.sub("", reference.strip().strip("'\"")).strip()
        if not relative or is_remote(relative):
            return None
        start_dir = Path(os.path.abspath(start))
        excluded = Path(os.path.abspath(exclude)) if exclude else None
        return self._search(start_dir, relative.lstrip("/\\"), excluded, 0)

    def _search(self, start: Path, relative: str, exclude: Path | None, depth: int) -> str | None:
        # Depth only changes the outcome when the search is bounded.
        key = (start, relative, exclude, depth if self.max_depth is not None else 0)
        with self._lock:
            if key in self._cache:
                return self._cache[key]
        result = self._search_uncached(start, relative, exclude, depth)
        with self._lock:
            self._cache[key] = result
        return result

    def _search_uncached(
        self, start: Path, relative: str, exclude: Path | None, depth: int
    ) -> str | None:
        if not start.is_dir():
            return None

        candidate = Path(os.path.abspath(start / relative))
        if candidate.is_file():
            return self._encode(candidate)

        parent = start.parent
        if parent == self.root or start == self.root or parent == start:
            return None
        if self.max_depth is not None and depth >= self.max_depth:
            return None

        # Children first, then the parent; the caller's directory is skipped so
        # the search never bounces straight back.
        for directory in [*_subdirectories(start), parent]:
            if directory == exclude:
                continue
            result = self._search(directory, relative, start, depth + 1)
            if result:
                return result
        return None

    def _encode(self, path: Path) -> str | None:
        try:
            size = path.stat().st_size
            if self.max_bytes is not None and size > self.max_bytes:
                logger.debug("not inlining %s: %d bytes exceeds %d", path, size, self.max_bytes)
                return None
            data = path.read_bytes()
        except OSError as exc:
            logger.debug("not inlining %s: %s", path, exc)
            return None
        media_type = media_type_for(str(path))
        logger.debug("inlining %s as %s (%d bytes)", path, media_type, size)
        return css_data_url(data, media_type)


def _subdirectories(directory: Path) -> list[Path]:
    try:
        entries = sorted(directory.iterdir())
    except OSError:
        return []
    return [entry for entry in entries if entry.is_dir()]
