"""
Toolchain invocation for haulbuild.

Thin wrappers around the dotnet CLI. Every call goes through an injectable
command runner so the orchestrator never touches subprocess directly.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from haulbuild.core.utils import INVOCATION_ERRORS, CommandResult, CommandRunner, format_cmd, run_cmd

INFO_LINE_PATTERN = re.compile(r"version|framework", re.IGNORECASE)


class ToolchainError(RuntimeError):
    """Raised when a toolchain query exits non-zero."""


class DotnetToolchain:
    """Issues version queries, builds and cleans against the dotnet CLI."""

    def __init__(
        self,
        executable: str = "dotnet",
        runner: CommandRunner = run_cmd,
        cwd: Optional[Path] = None,
    ):
        self.executable = executable
        self.runner = runner
        self.cwd = cwd

    def _run(self, *args: str) -> CommandResult:
        return self.runner([self.executable, *args], self.cwd)

    def _query(self, *args: str) -> list[str]:
        result = self._run(*args)
        if not result.ok:
            raise ToolchainError(
                f"'{format_cmd(result.cmd)}' exited with code {result.returncode}"
            )
        return [line.rstrip() for line in result.stdout.splitlines() if line.strip()]

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def version(self) -> Optional[str]:
        """Default SDK version, or None if the toolchain is unavailable."""
        try:
            result = self._run("--version")
        except INVOCATION_ERRORS:
            return None
        if not result.ok:
            return None
        return result.stdout.strip() or None

    def list_sdks(self) -> list[str]:
        return self._query("--list-sdks")

    def list_runtimes(self) -> list[str]:
        return self._query("--list-runtimes")

    def info_lines(self) -> list[str]:
        """Lines of ``dotnet --info`` that mention a version or framework."""
        return [
            line.strip()
            for line in self._query("--info")
            if INFO_LINE_PATTERN.search(line)
        ]

    # -------------------------------------------------------------------------
    # Build operations
    # -------------------------------------------------------------------------

    def build_command(self, project: Path, configuration: str, verbose: bool = False) -> list[str]:
        verbosity = "detailed" if verbose else "minimal"
        return [
            self.executable,
            "build",
            str(project),
            "--configuration",
            configuration,
            "--verbosity",
            verbosity,
        ]

    def clean_command(self, project: Path, configuration: str) -> list[str]:
        return [self.executable, "clean", str(project), "--configuration", configuration]

    def build(self, project: Path, configuration: str, verbose: bool = False) -> CommandResult:
        """Build a project descriptor. Invocation errors propagate to the caller."""
        return self.runner(self.build_command(project, configuration, verbose), self.cwd)

    def clean(self, project: Path, configuration: str) -> CommandResult:
        """Clean a project descriptor. Invocation errors propagate to the caller."""
        return self.runner(self.clean_command(project, configuration), self.cwd)
