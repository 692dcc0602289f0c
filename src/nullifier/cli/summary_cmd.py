"""nullifier summary command."""

from __future__ import annotations

import click

from nullifier.cli.common import build_config, guarded, read_log
from nullifier.core.models import DiagnosticParseError
from nullifier.core.output import print_diagnostic_summary, print_file_list, print_parse_error
from nullifier.diagnostics.parser import parse_diagnostics
from nullifier.diagnostics.summary import format_file_list, summarize


@click.command()
@click.argument("log", type=click.Path(exists=True, dir_okay=False))
@click.option("--project", "-p", default=".", type=click.Path(exists=True), help="Project folder the log refers to")
@click.option("--files", "files_only", is_flag=True, help="Only print the quoted list of files")
@guarded
def summary(log: str, project: str, files_only: bool):
    """Summarize the diagnostics in a saved build LOG without changing anything."""
    config = build_config(project)
    try:
        diagnostics = parse_diagnostics(read_log(log))
    except DiagnosticParseError as e:
        print_parse_error(e)
        raise SystemExit(2)

    if not files_only:
        print_diagnostic_summary(summarize(diagnostics, config.project_path))
    print_file_list(format_file_list(diagnostics, config.project_path))
