"""nullifier apply command."""

from __future__ import annotations

import click

from nullifier.cli.common import build_config, guarded, read_log
from nullifier.fix.session import FixSession


@click.command()
@click.argument("log", type=click.Path(exists=True, dir_okay=False))
@click.option("--project", "-p", default=".", type=click.Path(exists=True), help="Project folder or file the log refers to")
@click.option("--dry-run/--no-dry-run", default=None, help="Compute fixes without writing files")
@click.option("--verbose/--quiet", "-v", default=None, help="Show each fix that's made")
@click.option("--fix-data-members/--no-fix-data-members", default=None, help="Allow fields and properties to be marked nullable")
@click.option("--summarize/--no-summarize", default=None, help="Print diagnostic counts by folder, file and code")
@click.option("--list-files/--no-list-files", default=None, help="Print the files that have diagnostics")
@guarded
def apply(
    log: str,
    project: str,
    dry_run: bool | None,
    verbose: bool | None,
    fix_data_members: bool | None,
    summarize: bool | None,
    list_files: bool | None,
):
    """Fix the diagnostics in a saved build LOG with one pass, without building."""
    config = build_config(
        project,
        dry_run=dry_run,
        verbose=verbose,
        fix_data_members=fix_data_members,
        summarize=summarize,
        list_files=list_files,
    )
    run = FixSession(config).process(read_log(log))
    if run.parse_error is not None:
        raise SystemExit(2)
