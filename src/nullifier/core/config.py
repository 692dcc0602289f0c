"""Configuration management for Nullifier (nullifier.toml parsing + defaults)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    try:
        import tomli as tomllib  # type: ignore[no-redef]
    except ImportError:
        tomllib = None  # type: ignore[assignment]

CONFIG_FILE_NAME = "nullifier.toml"


@dataclass
class FixConfig:
    dry_run: bool = False
    verbose: bool = False
    fix_data_members: bool = False
    max_lookback_lines: int = 120


@dataclass
class BuildConfig:
    tool: str | None = None
    enable_nullable: bool = True
    timeout: int | None = None


@dataclass
class ReportConfig:
    summarize: bool = False
    list_files: bool = False


@dataclass
class NullifierConfig:
    """Complete Nullifier configuration."""

    project_path: Path = field(default_factory=Path.cwd)
    project_file: Path | None = None
    fix: FixConfig = field(default_factory=FixConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    @property
    def build_target(self) -> Path:
        return self.project_file or self.project_path


def resolve_project(target: Path) -> tuple[Path, Path | None]:
    """Split a project argument into (project directory, project file)."""
    target = target.resolve()
    if target.is_file():
        return target.parent, target
    return target, None


def load_config(project_path: Path | None = None) -> NullifierConfig:
    """Load configuration from nullifier.toml if present, otherwise return defaults."""
    if project_path is None:
        project_path = Path.cwd()

    project_dir, project_file = resolve_project(project_path)
    config = NullifierConfig(project_path=project_dir, project_file=project_file)

    config_file = project_dir / CONFIG_FILE_NAME
    if not config_file.exists():
        return config

    if tomllib is None:
        return config

    with open(config_file, "rb") as f:
        data = tomllib.load(f)

    if "fix" in data:
        fx = data["fix"]
        for attr in ("dry_run", "verbose", "fix_data_members", "max_lookback_lines"):
            if attr in fx:
                setattr(config.fix, attr, fx[attr])

    if "build" in data:
        b = data["build"]
        if "tool" in b:
            config.build.tool = b["tool"]
        if "enable_nullable" in b:
            config.build.enable_nullable = b["enable_nullable"]
        if "timeout" in b:
            config.build.timeout = b["timeout"]

    if "report" in data:
        r = data["report"]
        for attr in ("summarize", "list_files"):
            if attr in r:
                setattr(config.report, attr, r[attr])

    return config


def apply_overrides(config: NullifierConfig, **overrides) -> NullifierConfig:
    """Apply command-line overrides. ``None`` values leave the config untouched."""
    sections = {
        "dry_run": config.fix,
        "verbose": config.fix,
        "fix_data_members": config.fix,
        "max_lookback_lines": config.fix,
        "tool": config.build,
        "enable_nullable": config.build,
        "timeout": config.build,
        "summarize": config.report,
        "list_files": config.report,
    }
    for name, value in overrides.items():
        if value is None:
            continue
        if name not in sections:
            raise KeyError(f"Unknown configuration option: {name}")
        setattr(sections[name], name, value)
    return config
