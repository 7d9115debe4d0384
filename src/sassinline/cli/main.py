"""sassinline CLI entry point: Click group with subcommands."""

import click

from sassinline import __version__


@click.group()
@click.version_option(version=__version__, prog_name="sassinline")
def cli() -> None:
    """sassinline - compile Sass with clean source maps and inlined assets."""


# Import and register subcommands
from sassinline.cli.build import build  # noqa: E402

cli.add_command(build)
