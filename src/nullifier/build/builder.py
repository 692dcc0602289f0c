"""Runs the .NET build and captures its error/warning log."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tempfile
from collections.abc import Callable
from pathlib import Path

from nullifier.core.config import NullifierConfig
from nullifier.core.models import BuildError, BuildResult

logger = logging.getLogger(__name__)

# https://learn.microsoft.com/en-us/visualstudio/msbuild/msbuild-command-line-reference#switches-for-loggers
FILE_LOGGER_PARAMETERS = (
    "ErrorsOnly;WarningsOnly;NoSummary;NoItemAndPropertyList;"
    "ForceNoAlign;DisableConsoleColor"
)


class Builder:
    """Builds a project with MSBuild (directly or through ``dotnet build``)."""

    def __init__(
        self,
        config: NullifierConfig,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        which: Callable[[str], str | None] = shutil.which,
    ):
        self.config = config
        self.runner = runner
        self.which = which

    def resolve_tool(self) -> list[str]:
        """Command prefix for the build tool. Raises BuildError if none is found."""
        explicit = self.config.build.tool
        if explicit:
            tool = Path(explicit)
            if not tool.is_file():
                raise BuildError(f"Build tool not found: {explicit}")
            if tool.stem.lower() == "dotnet":
                return [str(tool), "build"]
            return [str(tool)]

        dotnet = self.which("dotnet")
        if dotnet:
            return [dotnet, "build"]

        msbuild = self.which("msbuild") or self.which("MSBuild.exe")
        if msbuild:
            return [msbuild]

        raise BuildError("Unable to find MSBuild or the dotnet CLI.")

    def command(self, log_file: Path) -> list[str]:
        target = self.config.build_target
        if not target.exists():
            raise BuildError(f"Project not found: {target}")
        return [
            *self.resolve_tool(),
            str(target),
            "-noConsoleLogger",
            f"-fileLoggerParameters:{FILE_LOGGER_PARAMETERS};LogFile={log_file}",
        ]

    def build(self) -> BuildResult:
        """Run the build and return its exit code and non-blank log lines."""
        fd, name = tempfile.mkstemp(prefix="nullifier-", suffix=".log")
        os.close(fd)
        log_file = Path(name)
        try:
            command = self.command(log_file)
            logger.debug("Running %s", " ".join(command))
            try:
                process = self.runner(
                    command,
                    capture_output=True,
                    text=True,
                    timeout=self.config.build.timeout,
                )
            except subprocess.TimeoutExpired as e:
                raise BuildError(f"Build timed out after {e.timeout} seconds.") from e
            except OSError as e:
                raise BuildError(f"Unable to run {command[0]}: {e}") from e
            logger.info("Build exit code: %d", process.returncode)

            text = log_file.read_text(encoding="utf-8-sig", errors="replace")
            lines = [line for line in text.splitlines() if line.strip()]
            return BuildResult(exit_code=process.returncode, lines=lines)
        finally:
            log_file.unlink(missing_ok=True)
