"""Tests for enabling nullable reference types in project files."""

from __future__ import annotations

from pathlib import Path

from nullifier.build.project import NullableStatus, enable_nullable, find_project_file

SDK_PROJECT = """\
<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
    <TargetFramework>net8.0</TargetFramework>
  </PropertyGroup>
</Project>
"""

LEGACY_PROJECT = """\
<?xml version="1.0" encoding="utf-8"?>
<Project ToolsVersion="15.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">
  <!-- Generated by Visual Studio -->
  <PropertyGroup Condition=" '$(Configuration)' == 'Debug' ">
    <DebugSymbols>true</DebugSymbols>
  </PropertyGroup>
  <PropertyGroup>
    <OutputType>Library</OutputType>
    <Nullable>disable</Nullable>
  </PropertyGroup>
</Project>
"""


def _write(tmp_path: Path, text: str, name: str = "App.csproj") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestFindProjectFile:
    def test_single_project(self, tmp_path: Path):
        path = _write(tmp_path, SDK_PROJECT)
        assert find_project_file(tmp_path) == path

    def test_ambiguous_folder(self, tmp_path: Path):
        _write(tmp_path, SDK_PROJECT, "A.csproj")
        _write(tmp_path, SDK_PROJECT, "B.csproj")
        assert find_project_file(tmp_path) is None

    def test_explicit_file(self, tmp_path: Path):
        path = _write(tmp_path, SDK_PROJECT, "Other.csproj")
        _write(tmp_path, SDK_PROJECT, "App.csproj")
        assert find_project_file(tmp_path, path) == path


class TestEnableNullable:
    def test_adds_nullable(self, tmp_path: Path):
        path = _write(tmp_path, SDK_PROJECT)

        assert enable_nullable(tmp_path) == NullableStatus.UPDATED
        text = path.read_text(encoding="utf-8")
        assert (
            "    <TargetFramework>net8.0</TargetFramework>\n"
            "    <Nullable>enable</Nullable>\n"
            "  </PropertyGroup>"
        ) in text
        assert text.startswith('<Project Sdk="Microsoft.NET.Sdk">')

    def test_already_enabled(self, tmp_path: Path):
        _write(tmp_path, SDK_PROJECT)
        enable_nullable(tmp_path)

        assert enable_nullable(tmp_path) == NullableStatus.ALREADY_ENABLED

    def test_dry_run_reports_without_writing(self, tmp_path: Path):
        path = _write(tmp_path, SDK_PROJECT)

        assert enable_nullable(tmp_path, dry_run=True) == NullableStatus.NEEDS_UPDATE
        assert path.read_text(encoding="utf-8") == SDK_PROJECT

    def test_no_project(self, tmp_path: Path):
        assert enable_nullable(tmp_path) == NullableStatus.NOT_FOUND

    def test_legacy_project_keeps_namespace_and_comments(self, tmp_path: Path):
        path = _write(tmp_path, LEGACY_PROJECT)

        assert enable_nullable(tmp_path, path) == NullableStatus.UPDATED
        text = path.read_text(encoding="utf-8")
        assert 'xmlns="http://schemas.microsoft.com/developer/msbuild/2003"' in text
        assert "ns0:" not in text
        assert "<!-- Generated by Visual Studio -->" in text
        assert "<Nullable>enable</Nullable>" in text
        assert "<Nullable>disable</Nullable>" not in text
        # The conditional group is left alone.
        assert "<DebugSymbols>true</DebugSymbols>\n  </PropertyGroup>" in text
