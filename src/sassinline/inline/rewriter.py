"""Rewrite ``url()`` references in compiled CSS into inlined data URIs.

Each declaration's position in the generated CSS is traced back through the
source map to the stylesheet that authored it, so references resolve relative
to where they were written rather than to where the CSS ended up. Substituted
text is spliced into the CSS and the map's generated columns are shifted to
match, keeping every mapping exact.
"""

from __future__ import annotations

import base64
import binascii
import bisect
import logging
import os
import re
from dataclasses import dataclass

from sassinline.errors import MapParseError
from sassinline.events import AssetInlined, EventBus
from sassinline.inline.resolver import AssetResolver
from sassinline.sourcemap import SourceMap
from sassinline.stylesheet import Declaration, parse_css

logger = logging.getLogger(__name__)

# url(x), url('x'), url("x"), with any ?query or #fragment left out of ``path``.
URL_PATTERN = re.compile(r"""url\s*\(\s*(?P<quote>['"]?)(?P<path>[^'"?#)]*)[^)]*\)""")

SOURCE_MAP_COMMENT = re.compile(r"/\*#\s*sourceMappingURL=[^*]*\*/")
_INLINE_MAP_RE = re.compile(
    r"/\*#\s*sourceMappingURL=data:application/json;(?:charset=[^;,]+;)?base64,"
    r"(?P<payload>[A-Za-z0-9+/=]+)\s*\*/"
)


@dataclass(frozen=True)
class Splice:
    """Replace ``css[start:end]`` with ``text``."""

    start: int
    end: int
    text: str


def split_urls(value: str) -> list[str]:
    """Split *value* into alternating literal text and whole ``url(...)`` tokens.

    Odd indexes hold the tokens; joining the list gives back *value*.
    """
    parts: list[str] = []
    last = 0
    for match in URL_PATTERN.finditer(value):
        parts.append(value[last : match.start()])
        parts.append(match.group(0))
        last = match.end()
    parts.append(value[last:])
    return parts


def embed_source_map(css: str, source_map: SourceMap) -> str:
    """Swap the compiler's ``sourceMappingURL`` comment for an inline base64 copy of *source_map*."""
    payload = base64.b64encode(source_map.to_json().encode("utf-8")).decode("ascii")
    comment = f"/*# sourceMappingURL=data:application/json;base64,{payload} */"
    if SOURCE_MAP_COMMENT.search(css):
        return SOURCE_MAP_COMMENT.sub(lambda _: comment, css, count=1)
    return f"{css.rstrip()}\n{comment}"


def read_inline_source_map(css: str) -> SourceMap | None:
    """Decode the inline source map embedded by :func:`embed_source_map`, if any."""
    match = _INLINE_MAP_RE.search(css)
    if not match:
        return None
    try:
        text = base64.b64decode(match.group("payload"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise MapParseError(f"Inline source map is not valid base64 JSON: {exc}") from exc
    return SourceMap.from_json(text)


def strip_source_map_comment(css: str) -> str:
    return SOURCE_MAP_COMMENT.sub("", css).rstrip()


def apply_splices(css: str, splices: list[Splice], source_map: SourceMap) -> str:
    """Apply non-overlapping *splices* to *css*, shifting *source_map* to match.

    Splices never span lines, so only generated columns to the right of each
    splice on its own line move.
    """
    if not splices:
        return css
    line_starts = [0] + [i + 1 for i, char in enumerate(css) if char == "\n"]
    ordered = sorted(splices, key=lambda s: s.start)
    for splice in reversed(ordered):
        line_index = bisect.bisect_right(line_starts, splice.start) - 1
        end_column = splice.end - line_starts[line_index]
        delta = len(splice.text) - (splice.end - splice.start)
        source_map.shift_columns(line_index + 1, end_column, delta)

    pieces: list[str] = []
    last = 0
    for splice in ordered:
        pieces.append(css[last : splice.start])
        pieces.append(splice.text)
        last = splice.end
    pieces.append(css[last:])
    return "".join(pieces)


class UrlRewriter:
    """Inline every resolvable ``url()`` reference found in compiled CSS."""

    def __init__(self, resolver: AssetResolver, *, event_bus: EventBus | None = None) -> None:
        self.resolver = resolver
        self.event_bus = event_bus or EventBus()

    def rewrite(
        self,
        css: str,
        source_map: SourceMap | None = None,
        fallback_dir: str | None = None,
    ) -> tuple[str, SourceMap]:
        """Return the rewritten CSS and a copy of *source_map* adjusted to it.

        When *source_map* is omitted the inline map embedded in *css* is used.
        *fallback_dir* is the authoring directory assumed for declarations the
        map has no position for. Raises
        :class:`~sassinline.errors.CssParseError` for unreadable CSS.
        """
        if source_map is None:
            source_map = read_inline_source_map(css)
            if source_map is None:
                raise MapParseError("CSS carries no inline source map")
        stylesheet = parse_css(css)

        splices: list[Splice] = []
        for declaration in stylesheet.declarations():
            splices.extend(self._rewrite_declaration(declaration, source_map, fallback_dir))
        logger.debug("inlining %d url() reference(s)", len(splices))

        adjusted = source_map.copy()
        return apply_splices(css, splices, adjusted), adjusted

    def authoring_directory(
        self,
        declaration: Declaration,
        source_map: SourceMap,
        fallback_dir: str | None = None,
    ) -> str | None:
        """Directory of the original stylesheet that produced *declaration*."""
        position = source_map.original_position_for(declaration.line, declaration.column - 1)
        if position is None:
            return fallback_dir
        return os.path.dirname(position.source)

    def _rewrite_declaration(
        self,
        declaration: Declaration,
        source_map: SourceMap,
        fallback_dir: str | None,
    ) -> list[Splice]:
        parts = split_urls(declaration.value)
        if len(parts) == 1:
            return []
        directory = self.authoring_directory(declaration, source_map, fallback_dir)
        if directory is None:
            return []

        splices: list[Splice] = []
        offset = declaration.start
        for i, part in enumerate(parts):
            end = offset + len(part)
            if i % 2:
                data_uri = self._inline(part, directory)
                if data_uri is not None:
                    splices.append(Splice(offset, end, data_uri))
                    parts[i] = data_uri
            offset = end

        declaration.value = "".join(parts)
        return splices

    def _inline(self, token: str, directory: str) -> str | None:
        reference = URL_PATTERN.fullmatch(token).group("path").strip()  # type: ignore[union-attr]
        data_uri = self.resolver.resolve(directory, reference)
        if data_uri is not None:
            self.event_bus.emit(AssetInlined(reference=reference, directory=directory))
        return data_uri
