"""Source map model: decoded v3 mappings with position lookup and column shifts."""

from __future__ import annotations

import bisect
import copy
import json
from dataclasses import dataclass, field
from typing import Any

from sassinline.errors import MapParseError
from sassinline.sourcemap.vlq import decode_values, encode_values

# A decoded segment with absolute values:
#   (generated column,)
#   (generated column, source index, original line, original column)
#   (generated column, source index, original line, original column, name index)
Segment = tuple[int, ...]


@dataclass(frozen=True)
class OriginalPosition:
    """Where a generated position came from. ``line`` is 1-based, ``column`` 0-based."""

    source: str
    line: int
    column: int
    name: str | None = None


@dataclass
class SourceMap:
    """A v3 source map with its ``mappings`` decoded per generated line."""

    sources: list[str] = field(default_factory=list)
    names: list[str] = field(default_factory=list)
    lines: list[list[Segment]] = field(default_factory=list)
    version: int = 3
    file: str | None = None
    source_root: str | None = None
    sources_content: list[str | None] | None = None

    # --- (de)serialisation ---------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SourceMap:
        if not isinstance(data, dict):
            raise MapParseError("Source map must be a JSON object")
        try:
            sources = [str(s) for s in data["sources"]]
            mappings = data["mappings"]
        except (KeyError, TypeError) as exc:
            raise MapParseError(f"Source map is missing a required field: {exc}") from exc
        if not isinstance(mappings, str):
            raise MapParseError("Source map 'mappings' must be a string")
        return cls(
            sources=sources,
            names=[str(n) for n in data.get("names", [])],
            lines=decode_mappings(mappings),
            version=int(data.get("version", 3)),
            file=data.get("file"),
            source_root=data.get("sourceRoot"),
            sources_content=data.get("sourcesContent"),
        )

    @classmethod
    def from_json(cls, text: str) -> SourceMap:
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as exc:
            raise MapParseError(f"Source map is not valid JSON: {exc}") from exc
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"version": self.version}
        if self.file is not None:
            data["file"] = self.file
        if self.source_root is not None:
            data["sourceRoot"] = self.source_root
        data["sources"] = list(self.sources)
        if self.sources_content is not None:
            data["sourcesContent"] = list(self.sources_content)
        data["names"] = list(self.names)
        data["mappings"] = encode_mappings(self.lines)
        return data

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def copy(self) -> SourceMap:
        return copy.deepcopy(self)

    # --- queries -------------------------------------------------------------

    def original_position_for(self, line: int, column: int) -> OriginalPosition | None:
        """Find the original position of a generated one.

        Uses the greatest mapped column on *line* that is not after *column*;
        returns ``None`` when nothing on the line precedes it or the segment
        carries no source.
        """
        if line < 1 or line > len(self.lines):
            return None
        segments = self.lines[line - 1]
        index = bisect.bisect_right([s[0] for s in segments], column) - 1
        if index < 0:
            return None
        segment = segments[index]
        if len(segment) < 4 or not 0 <= segment[1] < len(self.sources):
            return None
        name = None
        if len(segment) == 5 and 0 <= segment[4] < len(self.names):
            name = self.names[segment[4]]
        return OriginalPosition(
            source=self.sources[segment[1]],
            line=segment[2] + 1,
            column=segment[3],
            name=name,
        )

    # --- edits ---------------------------------------------------------------

    def shift_columns(self, line: int, from_column: int, delta: int) -> None:
        """Move every segment on *line* at or after *from_column* by *delta* columns."""
        if not delta or line < 1 or line > len(self.lines):
            return
        self.lines[line - 1] = [
            (s[0] + delta, *s[1:]) if s[0] >= from_column else s
            for s in self.lines[line - 1]
        ]


def decode_mappings(mappings: str) -> list[list[Segment]]:
    """Decode a ``mappings`` string into absolute segments per generated line."""
    lines: list[list[Segment]] = []
    source = original_line = original_column = name = 0
    for line_number, raw_line in enumerate(mappings.split(";"), start=1):
        segments: list[Segment] = []
        column = 0
        for raw in raw_line.split(","):
            if not raw:
                continue
            try:
                values = decode_values(raw)
            except ValueError as exc:
                raise MapParseError(f"Bad mapping on line {line_number}: {exc}") from exc
            if len(values) not in (1, 4, 5):
                raise MapParseError(
                    f"Bad mapping on line {line_number}: segment {raw!r} has "
                    f"{len(values)} fields"
                )
            column += values[0]
            if len(values) == 1:
                segments.append((column,))
                continue
            source += values[1]
            original_line += values[2]
            original_column += values[3]
            if len(values) == 5:
                name += values[4]
                segments.append((column, source, original_line, original_column, name))
            else:
                segments.append((column, source, original_line, original_column))
        segments.sort(key=lambda s: s[0])
        lines.append(segments)
    return lines


def encode_mappings(lines: list[list[Segment]]) -> str:
    """Encode absolute segments back into a ``mappings`` string."""
    encoded_lines: list[str] = []
    previous = [0, 0, 0, 0, 0]  # column (reset per line), source, line, column, name
    for segments in lines:
        previous[0] = 0
        encoded: list[str] = []
        for segment in segments:
            deltas = [value - previous[i] for i, value in enumerate(segment)]
            previous[: len(segment)] = segment
            encoded.append(encode_values(deltas))
        encoded_lines.append(",".join(encoded))
    return ";".join(encoded_lines)
