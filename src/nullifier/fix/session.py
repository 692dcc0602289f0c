"""The build → fix → rebuild loop."""

from __future__ import annotations

import logging
from collections.abc import Callable

from rich.prompt import Confirm

from nullifier.build.builder import Builder
from nullifier.build.project import NullableStatus, enable_nullable
from nullifier.core.config import NullifierConfig
from nullifier.core.models import BuildError, DiagnosticParseError, FixRun
from nullifier.core.output import (
    console,
    print_diagnostic_summary,
    print_file_list,
    print_parse_error,
    print_run_summary,
)
from nullifier.diagnostics.parser import parse_diagnostics
from nullifier.diagnostics.summary import format_file_list, summarize
from nullifier.fix.engine import FixEngine

logger = logging.getLogger(__name__)


def ask_to_rebuild(prompt: str) -> bool:
    return Confirm.ask(f"  {prompt}", default=False)


class FixSession:
    """Builds, fixes, and repeats while fixes are written and the user agrees."""

    def __init__(
        self,
        config: NullifierConfig,
        builder: Builder | None = None,
        confirm: Callable[[str], bool] | None = None,
        engine: FixEngine | None = None,
    ):
        self.config = config
        self.builder = builder or Builder(config)
        self.confirm = confirm or ask_to_rebuild
        self.engine = engine or FixEngine(config.project_path, config.fix)

    def run(self) -> list[FixRun]:
        """Run passes until one writes nothing or the user declines to rebuild."""
        runs: list[FixRun] = []
        while True:
            run = self.run_once()
            if run is None:
                break
            runs.append(run)
            if not run.wrote_files:
                break

            prompt = (
                f"{run.fixes_applied} fixes were made out of {run.diagnostics_seen} "
                "diagnostics. Do you want to rebuild and try again?"
            )
            if not self.confirm(prompt):
                break
        return runs

    def run_once(self) -> FixRun | None:
        """One build and fix pass. Returns None when there was nothing to fix."""
        if self.config.build.enable_nullable:
            self._enable_nullable()

        try:
            result = self.builder.build()
        except BuildError as e:
            logger.debug("Build failed: %s", e)
            console.print(f"  [red]Unable to build.[/red] {e}")
            return None

        console.print(f"  Build exit code: {result.exit_code}")
        if not result.lines:
            console.print("  [green]Project built successfully.[/green]")
            return None

        console.print(f"  Analyzing {len(result.lines)} build diagnostics.")
        return self.process(result.lines)

    def process(self, lines: list[str]) -> FixRun:
        """Report on and fix one batch of diagnostic lines.

        A single unparsable line rejects the whole batch; the returned run
        then carries the parse error and no fixes.
        """
        try:
            diagnostics = parse_diagnostics(lines)
        except DiagnosticParseError as e:
            logger.debug("Rejected diagnostic batch: %s", e)
            print_parse_error(e)
            run = FixRun(diagnostics_seen=sum(1 for line in lines if line.strip()), parse_error=e)
            print_run_summary(run)
            return run

        if self.config.report.summarize:
            print_diagnostic_summary(summarize(diagnostics, self.config.project_path))
        if self.config.report.list_files:
            print_file_list(format_file_list(diagnostics, self.config.project_path))

        run = self.engine.fix(diagnostics)
        print_run_summary(run)
        return run

    def _enable_nullable(self) -> None:
        status = enable_nullable(
            self.config.project_path,
            self.config.project_file,
            dry_run=self.config.fix.dry_run,
        )
        if status == NullableStatus.UPDATED:
            console.print("  Project file updated to enable Nullable.")
        elif status == NullableStatus.NEEDS_UPDATE:
            console.print("  [yellow]Project file needs to enable Nullable.[/yellow]")
