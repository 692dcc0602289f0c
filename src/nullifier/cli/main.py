"""Click CLI entry point for Nullifier."""

from __future__ import annotations

import logging

import click

from nullifier._version import __version__


@click.group()
@click.version_option(version=__version__, prog_name="nullifier")
@click.option("--debug", is_flag=True, help="Log debug details to stderr")
def cli(debug: bool):
    """Nullifier - makes simple nullability fixes to a C# project from compiler diagnostics."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# Import and register subcommands
from nullifier.cli.fix_cmd import fix  # noqa: E402
from nullifier.cli.apply_cmd import apply  # noqa: E402
from nullifier.cli.summary_cmd import summary  # noqa: E402

cli.add_command(fix)
cli.add_command(apply)
cli.add_command(summary)


if __name__ == "__main__":
    cli()
