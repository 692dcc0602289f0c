"""Helpers shared by the CLI commands."""

from __future__ import annotations

import functools
from pathlib import Path

import click

from nullifier.core.config import NullifierConfig, apply_overrides, load_config
from nullifier.core.output import error_console


def guarded(command):
    """Report any unhandled exception with its traceback and exit with status 1."""

    @functools.wraps(command)
    def wrapper(*args, **kwargs):
        try:
            return command(*args, **kwargs)
        except click.exceptions.Exit:
            raise
        except click.ClickException:
            raise
        except Exception:
            error_console.print("[red]Unhandled exception:[/red]")
            error_console.print_exception()
            raise SystemExit(1)

    return wrapper


def build_config(project: str, **overrides) -> NullifierConfig:
    """Load nullifier.toml for the project and apply command-line overrides."""
    return apply_overrides(load_config(Path(project)), **overrides)


def read_log(log: str) -> list[str]:
    """Non-blank lines of a saved build log."""
    text = Path(log).read_text(encoding="utf-8-sig", errors="replace")
    return [line for line in text.splitlines() if line.strip()]
