"""Diagnostic counts by folder, file and code."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from pathlib import Path, PurePath

from nullifier.core.models import Diagnostic


@dataclass
class DiagnosticSummary:
    """Grouped diagnostic counts. Paths are relative to the project root when possible."""

    total: int = 0
    by_folder: Counter = field(default_factory=Counter)
    by_file: Counter = field(default_factory=Counter)
    by_code: Counter = field(default_factory=Counter)
    codes_by_file: dict[str, Counter] = field(default_factory=dict)

    def files_by_count(self) -> list[tuple[str, int]]:
        """Files in ascending count order, ties broken by name."""
        return sorted(self.by_file.items(), key=lambda item: (item[1], item[0]))

    def codes_for(self, name: str) -> list[tuple[str, int]]:
        counts = self.codes_by_file.get(name, Counter())
        return sorted(counts.items(), key=lambda item: (item[1], item[0]))


def relative_name(file: str, root: Path | None) -> str:
    """Return file relative to root, or unchanged if it lives elsewhere."""
    path = PurePath(file)
    if root is not None:
        try:
            return path.relative_to(root).as_posix()
        except ValueError:
            pass
    return path.as_posix()


def summarize(diagnostics: list[Diagnostic], root: Path | None = None) -> DiagnosticSummary:
    """Group diagnostics by folder, by file and by code."""
    summary = DiagnosticSummary(total=len(diagnostics))
    codes_by_file: dict[str, Counter] = defaultdict(Counter)

    for diagnostic in diagnostics:
        name = relative_name(diagnostic.file, root)
        folder = PurePath(name).parent.as_posix()
        summary.by_folder[folder] += 1
        summary.by_file[name] += 1
        summary.by_code[diagnostic.code] += 1
        codes_by_file[name][diagnostic.code] += 1

    summary.codes_by_file = dict(codes_by_file)
    return summary


def distinct_files(diagnostics: list[Diagnostic]) -> list[str]:
    """Distinct source files that have diagnostics, sorted."""
    return sorted({diagnostic.file for diagnostic in diagnostics})


def format_file_list(diagnostics: list[Diagnostic], root: Path | None = None) -> str:
    """Quoted, comma-joined list of the distinct files with diagnostics."""
    names = sorted({relative_name(file, root) for file in distinct_files(diagnostics)})
    return ", ".join(f'"{name}"' for name in names)
