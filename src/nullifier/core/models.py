"""Shared data models used across Nullifier modules."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import PureWindowsPath


class NullifierError(Exception):
    """Base class for errors raised by Nullifier."""


class DiagnosticParseError(NullifierError):
    """A raw diagnostic line did not have the expected shape."""

    def __init__(self, text: str):
        super().__init__(f"Unable to parse diagnostic: {text}")
        self.text = text


class BuildError(NullifierError):
    """The build collaborator could not run."""


class Severity(enum.Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single compiler diagnostic. Line and column are 0-based."""

    file: str
    line: int
    column: int
    code: str
    message: str
    severity: Severity = Severity.WARNING
    project: str = ""

    @property
    def file_name(self) -> str:
        return PureWindowsPath(self.file).name

    def __str__(self) -> str:
        return f"{self.file_name}({self.line + 1}): {self.code}: {self.message}"


@dataclass(frozen=True)
class LineEdit:
    """Replacement text for one buffered line."""

    line_index: int
    text: str
    change: str  # trimmed preview of the edited fragment


@dataclass
class FixOutcome:
    """Result of a successful heuristic. Holds one edit per changed line."""

    heuristic: str
    edits: list[LineEdit] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return bool(self.edits)


@dataclass
class AppliedFix:
    """An edit that was written into a file buffer."""

    diagnostic: Diagnostic
    heuristic: str
    line_index: int
    change: str
    persisted: bool = False

    @property
    def display_line(self) -> int:
        return self.line_index + 1


@dataclass
class FixRun:
    """Outcome of one pass over a diagnostic batch."""

    diagnostics_seen: int = 0
    fixes_applied: int = 0
    files_written: set[str] = field(default_factory=set)
    applied: list[AppliedFix] = field(default_factory=list)
    parse_error: DiagnosticParseError | None = None

    @property
    def wrote_files(self) -> bool:
        return bool(self.files_written)


@dataclass
class BuildResult:
    """Exit code and diagnostic lines captured from one build."""

    exit_code: int
    lines: list[str] = field(default_factory=list)
