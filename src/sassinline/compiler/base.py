"""Compiler protocol: what the orchestrator needs from a stylesheet compiler."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from sassinline.model.unit import OutputStyle


@dataclass(frozen=True)
class CompileResult:
    """Compiled CSS and, when one was requested, the raw source map text."""

    css: str
    source_map: str | None = None


class Compiler(Protocol):
    """Compile one stylesheet file.

    ``source_map`` names the map file the CSS will reference; ``None`` skips
    map generation. Implementations raise
    :class:`~sassinline.errors.CompileError` with the compiler's own error
    text when the input is rejected.
    """

    def compile(
        self,
        path: str,
        *,
        include_paths: Sequence[str],
        output_style: OutputStyle,
        source_map: str | None = None,
    ) -> CompileResult: ...
