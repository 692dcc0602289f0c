"""Fix engine: orders diagnostics, runs the heuristics and persists edits."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from nullifier.core.config import FixConfig
from nullifier.core.models import AppliedFix, Diagnostic, FixRun
from nullifier.core.output import print_applied_fix
from nullifier.fix.buffer import FileBuffer, is_read_only
from nullifier.fix.dispatch import DispatchTable

logger = logging.getLogger(__name__)


def order_diagnostics(diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
    """Sort by (file, line, column) so one cached buffer per file suffices."""
    return sorted(diagnostics, key=lambda d: (d.file, d.line, d.column))


class FixEngine:
    """Core engine that applies heuristic fixes for a batch of diagnostics.

    Only one FileBuffer is live at a time. It is replaced whenever the next
    diagnostic belongs to another file, and flushed to disk after every
    successful fix unless dry-run is on or the file is read-only.
    """

    def __init__(
        self,
        project_path: Path | None = None,
        config: FixConfig | None = None,
        dispatch: DispatchTable | None = None,
        on_fix: Callable[[AppliedFix], None] | None = None,
    ):
        self.project_path = (project_path or Path.cwd()).resolve()
        self.config = config or FixConfig()
        self.dispatch = dispatch or DispatchTable.from_config(self.config)
        if on_fix is None and self.config.verbose:
            on_fix = print_applied_fix
        self.on_fix = on_fix
        self.buffer: FileBuffer | None = None

    def fix(self, diagnostics: list[Diagnostic]) -> FixRun:
        """Apply fixes for parsed diagnostics."""
        run = FixRun(diagnostics_seen=len(diagnostics))
        self.buffer = None

        for diagnostic in order_diagnostics(diagnostics):
            if not self.dispatch.has_chain(diagnostic.code):
                logger.debug("No heuristics for %s", diagnostic.code)
                continue

            path = self._resolve_file(diagnostic.file)
            if not path.is_file():
                logger.debug("Skipping %s: file not found", diagnostic)
                continue

            buffer = self._buffer_for(path)
            outcome = self.dispatch.dispatch(diagnostic, buffer)
            if outcome is None:
                continue

            run.fixes_applied += 1
            persist = not self.config.dry_run and not is_read_only(path)
            for edit in outcome.edits:
                buffer.set_line(edit.line_index, edit.text)
                applied = AppliedFix(
                    diagnostic=diagnostic,
                    heuristic=outcome.heuristic,
                    line_index=edit.line_index,
                    change=edit.change,
                    persisted=persist,
                )
                run.applied.append(applied)
                if self.on_fix:
                    self.on_fix(applied)

            # Flushed per fix, not per file.
            if persist:
                buffer.flush()
                run.files_written.add(str(path))

        return run

    def _buffer_for(self, path: Path) -> FileBuffer:
        """Return the live buffer for path, loading it if another file is cached."""
        if self.buffer is None or self.buffer.path != path:
            self.buffer = FileBuffer.load(path)
        return self.buffer

    def _resolve_file(self, file: str) -> Path:
        """Resolve possibly relative file path."""
        path = Path(file)
        if path.is_absolute():
            return path
        return self.project_path / path
