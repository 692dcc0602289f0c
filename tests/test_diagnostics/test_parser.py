"""Tests for diagnostic line parsing."""

from __future__ import annotations

import pytest

from nullifier.core.models import Diagnostic, DiagnosticParseError, Severity
from nullifier.diagnostics.parser import parse_diagnostic, parse_diagnostics

LINE = (
    r"C:\src\App\Widgets\Loader.cs(12,34): warning CS8600: Converting null literal "
    r"or possible null value to non-nullable type. [C:\src\App\App.csproj]"
)


class TestParseDiagnostic:
    def test_parses_all_fields(self):
        """Line and column should become 0-based."""
        diagnostic = parse_diagnostic(LINE)

        assert isinstance(diagnostic, Diagnostic)
        assert diagnostic.file == r"C:\src\App\Widgets\Loader.cs"
        assert diagnostic.line == 11
        assert diagnostic.column == 33
        assert diagnostic.code == "CS8600"
        assert diagnostic.severity == Severity.WARNING
        assert diagnostic.message == (
            "Converting null literal or possible null value to non-nullable type."
        )
        assert diagnostic.project == r"C:\src\App\App.csproj"

    def test_message_does_not_swallow_project(self):
        """The non-greedy message must stop before the bracketed project."""
        diagnostic = parse_diagnostic(
            "/src/A.cs(1,1): error CS8618: Non-nullable field '_x' must contain a value. [/src/A.csproj]"
        )
        assert diagnostic.severity == Severity.ERROR
        assert diagnostic.message == "Non-nullable field '_x' must contain a value."
        assert diagnostic.project == "/src/A.csproj"

    def test_ignores_trailing_newline(self):
        diagnostic = parse_diagnostic(LINE + "\r\n")
        assert diagnostic.project == r"C:\src\App\App.csproj"

    def test_file_name_handles_windows_paths(self):
        assert parse_diagnostic(LINE).file_name == "Loader.cs"

    def test_str_uses_one_based_line(self):
        assert str(parse_diagnostic(LINE)).startswith("Loader.cs(12): CS8600: ")

    @pytest.mark.parametrize(
        "text",
        [
            "Build succeeded.",
            "/src/A.cs(1): warning CS8600: message [/src/A.csproj]",
            "/src/A.cs(1,2): info CS8600: message [/src/A.csproj]",
            "/src/A.cs(1,2): warning CS8600: message",
        ],
    )
    def test_rejects_malformed_lines(self, text: str):
        with pytest.raises(DiagnosticParseError) as excinfo:
            parse_diagnostic(text)
        assert excinfo.value.text == text


class TestParseDiagnostics:
    def test_skips_blank_lines(self):
        diagnostics = parse_diagnostics(["", LINE, "   ", LINE])
        assert len(diagnostics) == 2

    def test_one_bad_line_rejects_the_batch(self):
        """A single malformed line should raise instead of returning a partial batch."""
        with pytest.raises(DiagnosticParseError):
            parse_diagnostics([LINE, "MSBUILD : error MSB1009: Project file does not exist.", LINE])
