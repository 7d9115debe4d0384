"""CLI command: sassinline build -- compile stylesheets into an output directory."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from sassinline.config import SassConfig
from sassinline.engine.orchestrator import Orchestrator
from sassinline.engine.report import banner
from sassinline.events import AssetInlined, UnitCompiled, UnitFailed
from sassinline.model.unit import CompileUnit, OutputFile, OutputStyle

_SOURCE_SUFFIXES = (".scss", ".sass")


def collect_units(sources: tuple[str, ...], cwd: Path) -> list[CompileUnit]:
    """Expand files and directories into compile units.

    A directory becomes the base of every stylesheet beneath it; partials
    (``_name.scss``) are skipped because they only exist to be imported.
    """
    units: list[CompileUnit] = []
    for source in sources:
        path = Path(source).resolve()
        if path.is_dir():
            for candidate in sorted(path.rglob("*")):
                if candidate.suffix in _SOURCE_SUFFIXES and not candidate.name.startswith("_"):
                    units.append(CompileUnit(str(candidate), cwd=str(cwd), base=str(path)))
        else:
            units.append(CompileUnit(str(path), cwd=str(cwd), base=str(path.parent)))
    return units


def write_outputs(outputs: list[OutputFile], out_dir: Path) -> None:
    for output in outputs:
        target = out_dir / output.relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(output.contents)


@click.command()
@click.argument("sources", nargs=-1, required=True, type=click.Path(exists=True))
@click.option(
    "--out", "-o", "out_dir", default="build", type=click.Path(file_okay=False),
    help="Directory to write .css and .css.map files to",
)
@click.option(
    "--style", default=OutputStyle.COMPRESSED.value,
    type=click.Choice([s.value for s in OutputStyle]),
    help="Compiler output style",
)
@click.option("--include-path", "-I", "include_paths", multiple=True, help="Extra library path")
@click.option("--banner-width", default=80, type=click.IntRange(min=0), help="Width of error banners, 0 for none")
@click.option("--workers", default=1, type=click.IntRange(min=1), help="Compile units in parallel")
@click.option("--max-inline-bytes", default=None, type=click.IntRange(min=0), help="Leave larger assets referenced")
@click.option("--max-search-depth", default=None, type=click.IntRange(min=0), help="Bound the asset search")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log each compiled file")
def build(
    sources: tuple[str, ...],
    out_dir: str,
    style: str,
    include_paths: tuple[str, ...],
    banner_width: int,
    workers: int,
    max_inline_bytes: int | None,
    max_search_depth: int | None,
    verbose: bool,
) -> None:
    """Compile SOURCES (files or directories) to CSS with inlined assets.

    Exits with code 1 if any stylesheet failed to compile.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    cwd = Path.cwd()
    config = SassConfig(
        output_style=style,
        banner_width=banner_width,
        library_paths=include_paths,
        root=str(cwd),
        max_inline_bytes=max_inline_bytes,
        max_search_depth=max_search_depth,
        workers=workers,
    )
    orchestrator = Orchestrator(config)
    if verbose:
        orchestrator.event_bus.subscribe(
            UnitCompiled, lambda e: click.echo(f"compiled {e.path}")
        )
        orchestrator.event_bus.subscribe(
            UnitFailed, lambda e: click.echo(f"failed {e.path} ({e.state})")
        )
        orchestrator.event_bus.subscribe(
            AssetInlined, lambda e: click.echo(f"  inlined {e.reference}")
        )
        click.echo(banner("-", banner_width, "css"))

    units = collect_units(sources, cwd)
    if not units:
        click.echo("No stylesheets found", err=True)
        sys.exit(1)

    outputs = orchestrator.compile(units)
    write_outputs(outputs, Path(out_dir))
    failed = bool(orchestrator.diagnostics)
    orchestrator.flush()

    click.echo(f"Wrote {len(outputs)} file(s) to {out_dir}")
    if failed:
        sys.exit(1)
