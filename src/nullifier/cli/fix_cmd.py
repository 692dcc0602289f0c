"""nullifier fix command."""

from __future__ import annotations

import click

from nullifier.cli.common import build_config, guarded
from nullifier.core.output import console
from nullifier.fix.session import FixSession


@click.command()
@click.argument("project", type=click.Path(exists=True))
@click.option("--tool", type=click.Path(exists=True, dir_okay=False), help="Full path to MSBuild or dotnet")
@click.option("--dry-run/--no-dry-run", default=None, help="Compute fixes without writing files")
@click.option("--verbose/--quiet", "-v", default=None, help="Show each fix that's made")
@click.option("--fix-data-members/--no-fix-data-members", default=None, help="Allow fields and properties to be marked nullable")
@click.option("--summarize/--no-summarize", default=None, help="Print diagnostic counts by folder, file and code")
@click.option("--list-files/--no-list-files", default=None, help="Print the files that have diagnostics")
@click.option("--enable-nullable/--no-enable-nullable", default=None, help="Turn on Nullable in the project file if needed")
@click.option("--yes", "-y", is_flag=True, help="Rebuild without asking after each pass")
@guarded
def fix(
    project: str,
    tool: str | None,
    dry_run: bool | None,
    verbose: bool | None,
    fix_data_members: bool | None,
    summarize: bool | None,
    list_files: bool | None,
    enable_nullable: bool | None,
    yes: bool,
):
    """Build PROJECT and fix nullability diagnostics until none are left.

    PROJECT is a project folder or a .csproj/.sln file.
    """
    config = build_config(
        project,
        tool=tool,
        dry_run=dry_run,
        verbose=verbose,
        fix_data_members=fix_data_members,
        summarize=summarize,
        list_files=list_files,
        enable_nullable=enable_nullable,
    )

    confirm = (lambda prompt: True) if yes else None
    runs = FixSession(config, confirm=confirm).run()

    total = sum(run.fixes_applied for run in runs)
    if len(runs) > 1:
        console.print(f"\n  {total} fixes over {len(runs)} passes.\n")
