"""Compiler backend built on libsass (the ``sass`` module)."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import sass

from sassinline.compiler.base import CompileResult
from sassinline.errors import CompileError
from sassinline.model.unit import OutputStyle

logger = logging.getLogger(__name__)


class LibsassCompiler:
    """Compile files with :func:`sass.compile`."""

    def __init__(self, precision: int = 5) -> None:
        self.precision = precision

    def compile(
        self,
        path: str,
        *,
        include_paths: Sequence[str],
        output_style: OutputStyle,
        source_map: str | None = None,
    ) -> CompileResult:
        kwargs: dict[str, object] = {
            "filename": path,
            "include_paths": list(include_paths),
            "output_style": output_style.value,
            "precision": self.precision,
        }
        if source_map:
            kwargs["source_map_filename"] = source_map
            kwargs["output_filename_hint"] = source_map.removesuffix(".map")

        logger.debug("sass.compile %s (map=%s)", path, source_map or "off")
        try:
            output = sass.compile(**kwargs)
        except sass.CompileError as exc:
            raise CompileError(str(exc)) from exc
        except OSError as exc:
            raise CompileError(f"{path}:1: error: {exc}") from exc

        if source_map:
            css, map_text = output
            return CompileResult(css=css, source_map=map_text)
        return CompileResult(css=output)
