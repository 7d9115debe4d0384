"""Source map normalisation: strip build-machine paths, then re-root sources.

The compiler reports sources relative to wherever the map was written, with
``../`` hops and (on some platforms) absolute build paths mixed in. The first
pass turns every source into an absolute filesystem path so that positions can
be traced back to real directories; the second pass, run after the CSS has
been rewritten, makes them root-relative for the map that gets shipped.
"""

from __future__ import annotations

import os
import re

from sassinline.sourcemap.model import SourceMap

_SEPARATOR = r"[\\/]+"
_PARENT_HOP = re.compile(r"\.\.[\\/]+")
_REPEATED_SLASH = re.compile(r"/{2,}")


def directory_pattern(directory: str) -> re.Pattern[str]:
    """Match *directory* written with either separator, at a path-segment boundary."""
    parts = [re.escape(p) for p in re.split(_SEPARATOR, directory) if p]
    return re.compile(
        rf"(?<![^\\/])(?:{_SEPARATOR})?" + _SEPARATOR.join(parts) + r"(?=[\\/]|$)"
    )


def normalize_source(source: str, patterns: list[re.Pattern[str]], root: str) -> str:
    """Reduce one source entry to an absolute, forward-slashed path under *root*."""
    value = _PARENT_HOP.sub("", source)
    for pattern in patterns:
        value = pattern.sub("", value)
    value = value.replace("\\", "/")
    value = _REPEATED_SLASH.sub("/", value).lstrip("/")
    return os.path.abspath(os.path.join(root, value)).replace("\\", "/")


def normalize_source_map(raw: str, cwd: str, root: str | None = None) -> SourceMap:
    """Parse the compiler's map text and resolve every source to an absolute path.

    Occurrences of *cwd* (and of *root*, so that an already normalised map comes
    back unchanged) and every ``../`` artifact are removed before resolving the
    remainder against *root*. Raises :class:`~sassinline.errors.MapParseError`
    on malformed text.
    """
    root = os.path.abspath(root or os.getcwd())
    source_map = SourceMap.from_json(raw)
    patterns = [directory_pattern(d) for d in dict.fromkeys([cwd, root]) if d.strip("\\/")]
    source_map.sources = [normalize_source(s, patterns, root) for s in source_map.sources]
    return source_map


def relativize_sources(source_map: SourceMap, root: str | None = None) -> SourceMap:
    """Make sources root-relative (``/src/app.scss``) and drop embedded content."""
    root = os.path.abspath(root or os.getcwd())
    result = source_map.copy()
    result.sources = [
        "/" + os.path.relpath(source, root).replace("\\", "/") for source in source_map.sources
    ]
    result.file = None
    result.source_root = None
    result.sources_content = None
    return result
