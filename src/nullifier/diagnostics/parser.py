"""Parse build-log diagnostic lines into Diagnostic records."""

from __future__ import annotations

import re
from collections.abc import Iterable

from nullifier.core.models import Diagnostic, DiagnosticParseError, Severity

# Path/To/File.cs(12,34): warning CS8600: Converting null literal ... [Path/To/Project.csproj]
DIAGNOSTIC_RE = re.compile(
    r"^(?P<file>.+?)\((?P<line>\d+),(?P<column>\d+)\): "
    r"(?P<severity>error|warning) (?P<code>\w+): "
    r"(?P<message>.+?) \[(?P<project>.+?)\]$"
)


def parse_diagnostic(text: str) -> Diagnostic:
    """Parse one diagnostic line. Raises DiagnosticParseError if it doesn't fit."""
    text = text.rstrip("\r\n")
    match = DIAGNOSTIC_RE.match(text)
    if not match:
        raise DiagnosticParseError(text)

    return Diagnostic(
        file=match.group("file"),
        line=int(match.group("line")) - 1,
        column=int(match.group("column")) - 1,
        code=match.group("code"),
        message=match.group("message"),
        severity=Severity(match.group("severity")),
        project=match.group("project"),
    )


def parse_diagnostics(lines: Iterable[str]) -> list[Diagnostic]:
    """Parse a whole batch of diagnostic lines.

    Blank lines are ignored. Any other line that fails to parse rejects the
    entire batch: the DiagnosticParseError propagates and no records are
    returned.
    """
    return [parse_diagnostic(line) for line in lines if line.strip()]
