"""Compile orchestrator: validate, map, rewrite, and emit each stylesheet.

Every unit runs ``PENDING -> VALIDATING -> MAPPING -> REWRITING -> EMITTED``,
dropping to ``FAILED`` at the first error. The validating pass compiles
without a source map purely to surface errors cheaply; only a unit that
compiles cleanly is compiled again with a map.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TextIO

from sassinline.compiler.base import CompileResult, Compiler
from sassinline.config import SassConfig
from sassinline.engine.report import DiagnosticLog
from sassinline.errors import CompileError, CssParseError, MapParseError
from sassinline.events import EventBus, RunCompleted, UnitCompiled, UnitFailed, UnitStarted
from sassinline.inline.resolver import AssetResolver
from sassinline.inline.rewriter import UrlRewriter, embed_source_map, strip_source_map_comment
from sassinline.model.diagnostic import Diagnostic, parse_diagnostic
from sassinline.model.library import LibraryPaths
from sassinline.model.unit import CompileUnit, OutputFile, UnitState
from sassinline.sourcemap.normalize import normalize_source_map, relativize_sources

logger = logging.getLogger(__name__)


class _UnitFailure(Exception):
    def __init__(self, state: UnitState, diagnostic: Diagnostic):
        self.state = state
        self.diagnostic = diagnostic
        super().__init__(str(diagnostic))


class Orchestrator:
    """Drive the compiler over a batch of units and collect their outputs."""

    def __init__(
        self,
        config: SassConfig | None = None,
        *,
        compiler: Compiler | None = None,
        libraries: LibraryPaths | None = None,
        resolver: AssetResolver | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.config = config or SassConfig()
        if compiler is None:
            from sassinline.compiler.libsass import LibsassCompiler

            compiler = LibsassCompiler()
        self.compiler = compiler
        self.libraries = libraries or LibraryPaths()
        self.libraries.add(self.config.library_paths)
        self.event_bus = event_bus or EventBus()
        self.resolver = resolver or AssetResolver(
            self.config.root,
            max_depth=self.config.max_search_depth,
            max_bytes=self.config.max_inline_bytes,
        )
        self.rewriter = UrlRewriter(self.resolver, event_bus=self.event_bus)
        self.diagnostics = DiagnosticLog()

    # --- library registration ------------------------------------------------

    def register_libraries(self, *paths: str | Path | Iterable) -> None:
        """Add explicit include paths ahead of any compilation."""
        self.libraries.add(*paths)

    def observe(self, units: Iterable[CompileUnit]) -> list[CompileUnit]:
        """Infer include paths from each unit's base directory."""
        return [self.libraries.observe(unit) for unit in units]

    # --- compilation ---------------------------------------------------------

    def compile(
        self, units: Iterable[CompileUnit], workers: int | None = None
    ) -> list[OutputFile]:
        """Compile every unit; outputs follow input order, failures yield nothing.

        All units are observed before the first one compiles, so the include
        list is complete (and read-only) while compilers run. Asset lookups
        are memoised for the duration of one call.
        """
        self.resolver.clear()
        units = self.observe(units)
        workers = workers or self.config.workers
        if workers > 1 and len(units) > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                results = list(pool.map(self.compile_unit, units))
        else:
            results = [self.compile_unit(unit) for unit in units]

        failed = sum(1 for outputs in results if not outputs)
        self.event_bus.emit(RunCompleted(compiled=len(results) - failed, failed=failed))
        return [output for outputs in results for output in outputs]

    def compile_unit(self, unit: CompileUnit) -> list[OutputFile]:
        """Compile one unit into ``[<name>.css, <name>.css.map]``, or ``[]`` on failure."""
        self.event_bus.emit(UnitStarted(path=unit.path))
        try:
            outputs = self._run(unit)
        except _UnitFailure as failure:
            logger.debug("%s failed while %s", unit.path, failure.state.value)
            self.diagnostics.add(failure.diagnostic)
            self.event_bus.emit(
                UnitFailed(
                    path=unit.path,
                    state=failure.state.value,
                    diagnostic=str(failure.diagnostic),
                )
            )
            return []
        self.event_bus.emit(
            UnitCompiled(path=unit.path, outputs=tuple(o.path for o in outputs))
        )
        return outputs

    def _run(self, unit: CompileUnit) -> list[OutputFile]:
        include_paths = self.libraries.as_list()

        state = self._enter(unit, UnitState.VALIDATING)
        self._invoke(unit, state, include_paths, None)

        state = self._enter(unit, UnitState.MAPPING)
        result = self._invoke(
            unit, state, include_paths, os.path.join(unit.cwd, unit.map_name)
        )
        if result.source_map is None:
            raise _UnitFailure(state, Diagnostic(f"{unit.path}: compiler returned no source map"))

        state = self._enter(unit, UnitState.REWRITING)
        try:
            source_map = normalize_source_map(result.source_map, unit.cwd, self.config.root)
            css = embed_source_map(result.css, source_map)
            css, final_map = self.rewriter.rewrite(css, source_map, fallback_dir=unit.directory)
        except (MapParseError, CssParseError) as exc:
            raise _UnitFailure(state, Diagnostic(f"{unit.path}: {exc}")) from exc
        final_map = relativize_sources(final_map, self.config.root)

        self._enter(unit, UnitState.EMITTED)
        css = f"{strip_source_map_comment(css)}\n/*# sourceMappingURL={unit.map_name} */"
        return [
            OutputFile.beside(unit, unit.css_name, css),
            OutputFile.beside(unit, unit.map_name, final_map.to_json(indent=2)),
        ]

    def _invoke(
        self,
        unit: CompileUnit,
        state: UnitState,
        include_paths: Sequence[str],
        source_map: str | None,
    ) -> CompileResult:
        try:
            return self.compiler.compile(
                unit.path,
                include_paths=include_paths,
                output_style=self.config.output_style,
                source_map=source_map,
            )
        except CompileError as exc:
            raise _UnitFailure(state, parse_diagnostic(exc.diagnostic, self.config.root)) from exc

    @staticmethod
    def _enter(unit: CompileUnit, state: UnitState) -> UnitState:
        logger.debug("%s: %s", unit.path, state.value)
        return state

    # --- reporting -----------------------------------------------------------

    def flush(self, stream: TextIO | None = None) -> str:
        """Print every diagnostic gathered so far, once, between banner rules."""
        return self.diagnostics.flush(stream or sys.stdout, self.config.banner_width)
