"""Source map decoding, lookup, and normalisation."""

from sassinline.sourcemap.model import OriginalPosition, SourceMap
from sassinline.sourcemap.normalize import normalize_source_map, relativize_sources

__all__ = [
    "OriginalPosition",
    "SourceMap",
    "normalize_source_map",
    "relativize_sources",
]
