"""Tests for the nullifier command line."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from nullifier import __version__
from nullifier.cli import fix_cmd
from nullifier.cli.main import cli

SOURCE = """\
class Widget
{
    void Load()
    {
        Foo first = null;
    }
}
"""

MESSAGE = "Converting null literal or possible null value to non-nullable type."


@pytest.fixture
def project(tmp_path: Path) -> Path:
    project = tmp_path.resolve()
    (project / "Widget.cs").write_text(SOURCE)
    (project / "Widget.csproj").write_text('<Project Sdk="Microsoft.NET.Sdk" />')
    return project


@pytest.fixture
def log(project: Path) -> Path:
    path = project / "build.log"
    path.write_text(
        f"{project / 'Widget.cs'}(5,13): warning CS8600: {MESSAGE} [{project / 'Widget.csproj'}]\n"
    )
    return path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_version(runner: CliRunner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_lists_commands(runner: CliRunner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    for command in ("fix", "apply", "summary"):
        assert command in result.output


class TestApply:
    def test_fixes_log(self, runner: CliRunner, project: Path, log: Path):
        result = runner.invoke(cli, ["apply", str(log), "--project", str(project), "--verbose"])

        assert result.exit_code == 0, result.output
        assert "Fix CS8600 Widget.cs(5): Foo? first = null;" in result.output
        assert "1 fixes were made out of 1 diagnostics." in result.output
        assert "Foo? first = null;" in (project / "Widget.cs").read_text()

    def test_dry_run(self, runner: CliRunner, project: Path, log: Path):
        result = runner.invoke(cli, ["apply", str(log), "-p", str(project), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "1 potential fixes were found." in result.output
        assert (project / "Widget.cs").read_text() == SOURCE

    def test_unparsable_log(self, runner: CliRunner, project: Path):
        log = project / "bad.log"
        log.write_text("Build FAILED.\n")

        result = runner.invoke(cli, ["apply", str(log), "-p", str(project)])

        assert result.exit_code == 2
        assert (project / "Widget.cs").read_text() == SOURCE


class TestSummary:
    def test_prints_tables_and_files(self, runner: CliRunner, project: Path, log: Path):
        result = runner.invoke(cli, ["summary", str(log), "-p", str(project)])

        assert result.exit_code == 0, result.output
        assert "Diagnostics by file" in result.output
        assert "CS8600" in result.output
        assert '"Widget.cs"' in result.output
        assert (project / "Widget.cs").read_text() == SOURCE

    def test_files_only(self, runner: CliRunner, project: Path, log: Path):
        result = runner.invoke(cli, ["summary", str(log), "-p", str(project), "--files"])

        assert result.exit_code == 0
        assert result.output.strip() == '"Widget.cs"'


class TestFix:
    @pytest.fixture
    def sessions(self, monkeypatch) -> list:
        created = []

        class RecordingSession:
            def __init__(self, config, confirm=None):
                self.config = config
                self.confirm = confirm
                created.append(self)

            def run(self):
                return []

        monkeypatch.setattr(fix_cmd, "FixSession", RecordingSession)
        return created

    def test_options_override_config(self, runner: CliRunner, project: Path, sessions: list):
        (project / "nullifier.toml").write_text("[fix]\nverbose = true\n")

        result = runner.invoke(
            cli,
            ["fix", str(project / "Widget.csproj"), "--quiet", "--fix-data-members", "--no-enable-nullable", "-y"],
        )

        assert result.exit_code == 0, result.output
        config = sessions[0].config
        assert config.project_file == project / "Widget.csproj"
        assert config.fix.verbose is False
        assert config.fix.fix_data_members is True
        assert config.build.enable_nullable is False
        assert sessions[0].confirm("rebuild?") is True

    def test_asks_before_rebuilding_by_default(self, runner: CliRunner, project: Path, sessions: list):
        result = runner.invoke(cli, ["fix", str(project)])

        assert result.exit_code == 0, result.output
        assert sessions[0].confirm is None

    def test_unhandled_exception_exits_with_one(self, runner: CliRunner, project: Path, monkeypatch):
        class BrokenSession:
            def __init__(self, config, confirm=None):
                raise RuntimeError("boom")

        monkeypatch.setattr(fix_cmd, "FixSession", BrokenSession)

        result = runner.invoke(cli, ["fix", str(project)])

        assert result.exit_code == 1
