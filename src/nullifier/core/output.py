"""Rich terminal formatting for Nullifier output."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from nullifier.core.models import AppliedFix, DiagnosticParseError, FixRun
from nullifier.diagnostics.summary import DiagnosticSummary

console = Console()
error_console = Console(stderr=True)


def format_applied_fix(fix: AppliedFix) -> str:
    """Plain one-line description of an applied fix."""
    return (
        f"Fix {fix.diagnostic.code} {fix.diagnostic.file_name}"
        f"({fix.display_line}): {fix.change}"
    )


def print_applied_fix(fix: AppliedFix) -> None:
    """Print a single applied fix."""
    suffix = "" if fix.persisted else "  [dim](not written)[/dim]"
    console.print(f"  [green]{escape(format_applied_fix(fix))}[/green]{suffix}", highlight=False)


def print_parse_error(error: DiagnosticParseError) -> None:
    error_console.print(f"  [red]{escape(str(error))}[/red]", highlight=False)
    error_console.print("  [dim]No fixes were attempted for this batch.[/dim]")


def print_run_summary(run: FixRun) -> None:
    """Print the fix count for one pass."""
    if run.wrote_files:
        console.print(
            f"\n  [green]{run.fixes_applied} fixes were made out of "
            f"{run.diagnostics_seen} diagnostics.[/green]"
        )
    else:
        console.print(
            f"\n  No fixes were made out of {run.diagnostics_seen} diagnostics. "
            f"{run.fixes_applied} potential fixes were found."
        )


def print_diagnostic_summary(summary: DiagnosticSummary) -> None:
    """Print diagnostic counts by folder, file and code."""
    if not summary.total:
        console.print("\n  No diagnostics to summarize.\n")
        return

    folders = Table(title="Diagnostics by folder", title_justify="left")
    folders.add_column("Folder")
    folders.add_column("Count", justify="right")
    for folder, count in sorted(summary.by_folder.items()):
        folders.add_row(escape(folder), f"{count:,}")

    files = Table(title="Diagnostics by file", title_justify="left")
    files.add_column("File")
    files.add_column("Count", justify="right")
    files.add_column("Codes")
    for name, count in summary.files_by_count():
        codes = "; ".join(f"{code}={n:,}" for code, n in summary.codes_for(name))
        files.add_row(escape(name), f"{count:,}", codes)

    codes = Table(title="Diagnostics by code", title_justify="left")
    codes.add_column("Code")
    codes.add_column("Count", justify="right")
    for code, count in sorted(summary.by_code.items(), key=lambda item: (-item[1], item[0])):
        codes.add_row(code, f"{count:,}")

    console.print()
    console.print(folders)
    console.print(files)
    console.print(codes)
    console.print(f"  Total: {summary.total:,}\n")


def print_file_list(file_list: str) -> None:
    """Print the quoted file list without wrapping so it can be copied."""
    console.print(file_list, markup=False, highlight=False, soft_wrap=True)
