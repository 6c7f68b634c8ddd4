"""
Shared pytest fixtures for haulbuild tests.

Provides a fake command runner that stands in for the dotnet CLI and
records every invocation, plus a throwaway workspace with both project
descriptors.

Test Tier Markers:
  @pytest.mark.evergreen - Tests that always run, never skip (production tests)
  @pytest.mark.dev       - Development/WIP tests, toggle-able
"""

from __future__ import annotations

import io
from contextlib import redirect_stdout
from pathlib import Path
from typing import Optional, Sequence

import pytest

from haulbuild.build.config import DEFAULT_PROJECTS, BuildConfig, Workspace
from haulbuild.build.orchestrator import BuildOrchestrator
from haulbuild.build.toolchain import DotnetToolchain
from haulbuild.core.utils import CommandResult, Logger


# =============================================================================
# Test Data Constants
# =============================================================================

SDK_VERSION = "8.0.404"

LIST_SDKS_OUTPUT = "8.0.404 [/usr/share/dotnet/sdk]\n9.0.100 [/usr/share/dotnet/sdk]\n"

LIST_RUNTIMES_OUTPUT = (
    "Microsoft.AspNetCore.App 8.0.11 [/usr/share/dotnet/shared/Microsoft.AspNetCore.App]\n"
    "Microsoft.NETCore.App 8.0.11 [/usr/share/dotnet/shared/Microsoft.NETCore.App]\n"
)

INFO_OUTPUT = """.NET SDK:
 Version:           8.0.404
 Commit:            7b190310f2

Runtime Environment:
 OS Name:     ubuntu
 Base Path:   /usr/share/dotnet/sdk/8.0.404/

Host:
  Version:      8.0.11
  Architecture: x64

.NET runtimes installed:
  Microsoft.NETCore.App 8.0.11 [/usr/share/dotnet/shared/Microsoft.NETCore.App]
"""

BUILD_OK_OUTPUT = """  Determining projects to restore...
  All projects are up-to-date for restore.
  {name} -> /work/1.6/Assemblies/{name}.dll

Build succeeded.
    0 Warning(s)
    0 Error(s)
"""

BUILD_FAIL_OUTPUT = """  Determining projects to restore...
/work/Source/{name}/Hauling.cs(12,5): error CS0103: The name 'foo' does not exist in the current context

Build FAILED.
    0 Warning(s)
    1 Error(s)
"""

CSPROJ_TEMPLATE = """<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
    <TargetFramework>{framework}</TargetFramework>
    <AssemblyName>{name}</AssemblyName>
  </PropertyGroup>
</Project>
"""


# =============================================================================
# Fake Toolchain
# =============================================================================


class FakeDotnet:
    """Command runner that answers like the dotnet CLI and records calls."""

    def __init__(
        self,
        build_codes: Optional[dict[str, int]] = None,
        clean_code: int = 0,
        missing: bool = False,
        version_code: int = 0,
        query_code: int = 0,
        launch_error_on: Optional[str] = None,
        launch_error: Optional[Exception] = None,
    ):
        self.build_codes = build_codes or {}
        self.clean_code = clean_code
        self.missing = missing
        self.version_code = version_code
        self.query_code = query_code
        self.launch_error_on = launch_error_on
        self.launch_error = launch_error or PermissionError(13, "Permission denied", "dotnet")
        self.calls: list[tuple[str, ...]] = []

    def __call__(self, cmd: Sequence[str], cwd: Optional[Path] = None) -> CommandResult:
        cmd = tuple(cmd)
        self.calls.append(cmd)
        if self.missing:
            raise FileNotFoundError(2, "No such file or directory", cmd[0])

        verb = cmd[1]
        if verb == "--version":
            return CommandResult(cmd, self.version_code, f"{SDK_VERSION}\n" if not self.version_code else "")
        if verb == "--list-sdks":
            return CommandResult(cmd, self.query_code, LIST_SDKS_OUTPUT)
        if verb == "--list-runtimes":
            return CommandResult(cmd, self.query_code, LIST_RUNTIMES_OUTPUT)
        if verb == "--info":
            return CommandResult(cmd, self.query_code, INFO_OUTPUT)

        name = Path(cmd[2]).stem
        if self.launch_error_on == f"{verb}:{name}":
            raise self.launch_error
        if verb == "clean":
            return CommandResult(cmd, self.clean_code, "", "clean exploded\n" if self.clean_code else "")
        if verb == "build":
            code = self.build_codes.get(name, 0)
            template = BUILD_OK_OUTPUT if code == 0 else BUILD_FAIL_OUTPUT
            return CommandResult(cmd, code, template.format(name=name))

        raise AssertionError(f"Unexpected command: {cmd}")

    def invocations(self, verb: str, project: Optional[str] = None) -> list[tuple[str, ...]]:
        """Calls for a verb (``build``/``clean``), optionally for one project."""
        return [
            cmd for cmd in self.calls
            if len(cmd) > 2 and cmd[1] == verb
            and (project is None or Path(cmd[2]).stem == project)
        ]


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test tiers."""
    config.addinivalue_line(
        "markers",
        "evergreen: tests that always run, never skip (production tests)"
    )
    config.addinivalue_line(
        "markers",
        "dev: development/WIP tests, toggle-able for active development"
    )


def write_csproj(path: Path, name: str, framework: str = "net48") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(CSPROJ_TEMPLATE.format(name=name, framework=framework))
    return path


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """A workspace containing both default project descriptors."""
    for project in DEFAULT_PROJECTS:
        write_csproj(tmp_path / project.path, project.name)
    return tmp_path


@pytest.fixture
def workspace(workspace_root: Path) -> Workspace:
    return Workspace(root=workspace_root, projects=DEFAULT_PROJECTS)


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def log(output: io.StringIO) -> Logger:
    return Logger(stream=output, use_color=False)


def make_orchestrator(
    workspace: Workspace,
    runner: FakeDotnet,
    log: Logger,
    **config_kwargs,
) -> BuildOrchestrator:
    """Wire an orchestrator around a fake runner."""
    toolchain = DotnetToolchain(runner=runner, cwd=workspace.root)
    return BuildOrchestrator(BuildConfig(**config_kwargs), workspace, toolchain, log)


# =============================================================================
# CLI Runner
# =============================================================================


class CLIResult:
    """Result of running the CLI."""

    def __init__(self, returncode: int, stdout: str):
        self.returncode = returncode
        self.stdout = stdout

    def __repr__(self) -> str:
        return f"CLIResult(returncode={self.returncode}, stdout={self.stdout[:100]!r}...)"


class CLIRunner:
    """Helper class to run the CLI in-process with a fake toolchain."""

    def __init__(self, root: Path, runner: FakeDotnet, monkeypatch: pytest.MonkeyPatch):
        self.root = root
        self.runner = runner
        from haulbuild import cli
        monkeypatch.setattr(cli, "run_cmd", runner)

    def run(self, args: list[str]) -> CLIResult:
        """Run CLI with given args (``--root`` is added automatically)."""
        from haulbuild.cli import main

        stdout_capture = io.StringIO()

        with redirect_stdout(stdout_capture):
            try:
                returncode = main(["--root", str(self.root), *args])
            except SystemExit as e:
                returncode = e.code if isinstance(e.code, int) else 1

        return CLIResult(
            returncode=returncode or 0,
            stdout=stdout_capture.getvalue(),
        )
