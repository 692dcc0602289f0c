"""Tests for config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from nullifier.core.config import (
    NullifierConfig,
    apply_overrides,
    load_config,
    resolve_project,
)


class TestLoadConfig:
    def test_defaults_when_no_config_file(self, tmp_path: Path):
        """Without a nullifier.toml, load_config should return defaults."""
        config = load_config(tmp_path)

        assert isinstance(config, NullifierConfig)
        assert config.project_path == tmp_path.resolve()
        assert config.project_file is None
        assert config.fix.dry_run is False
        assert config.fix.verbose is False
        assert config.fix.fix_data_members is False
        assert config.fix.max_lookback_lines == 120
        assert config.build.tool is None
        assert config.build.enable_nullable is True
        assert config.report.summarize is False

    def test_loads_toml_sections(self, tmp_path: Path):
        toml_content = """\
[fix]
verbose = true
fix_data_members = true
max_lookback_lines = 40

[build]
tool = "C:/Program Files/dotnet/dotnet.exe"
enable_nullable = false
timeout = 900

[report]
summarize = true
list_files = true
"""
        (tmp_path / "nullifier.toml").write_text(toml_content)
        config = load_config(tmp_path)

        assert config.fix.verbose is True
        assert config.fix.dry_run is False
        assert config.fix.fix_data_members is True
        assert config.fix.max_lookback_lines == 40
        assert config.build.tool == "C:/Program Files/dotnet/dotnet.exe"
        assert config.build.enable_nullable is False
        assert config.build.timeout == 900
        assert config.report.summarize is True
        assert config.report.list_files is True

    def test_project_file_uses_its_folder_config(self, tmp_path: Path):
        (tmp_path / "nullifier.toml").write_text("[fix]\ndry_run = true\n")
        project = tmp_path / "App.csproj"
        project.write_text("<Project />")

        config = load_config(project)

        assert config.project_path == tmp_path.resolve()
        assert config.project_file == project.resolve()
        assert config.build_target == project.resolve()
        assert config.fix.dry_run is True


class TestResolveProject:
    def test_directory(self, tmp_path: Path):
        assert resolve_project(tmp_path) == (tmp_path.resolve(), None)

    def test_file(self, tmp_path: Path):
        solution = tmp_path / "App.sln"
        solution.write_text("")
        assert resolve_project(solution) == (tmp_path.resolve(), solution.resolve())


class TestApplyOverrides:
    def test_none_leaves_config_alone(self, tmp_path: Path):
        config = load_config(tmp_path)
        apply_overrides(config, dry_run=None, verbose=True, tool=None)

        assert config.fix.dry_run is False
        assert config.fix.verbose is True
        assert config.build.tool is None

    def test_overrides_every_section(self, tmp_path: Path):
        config = apply_overrides(
            load_config(tmp_path),
            fix_data_members=True,
            enable_nullable=False,
            list_files=True,
        )
        assert config.fix.fix_data_members is True
        assert config.build.enable_nullable is False
        assert config.report.list_files is True

    def test_unknown_option(self, tmp_path: Path):
        with pytest.raises(KeyError):
            apply_overrides(load_config(tmp_path), color=True)
