"""
Build orchestrator for haulbuild.

Checks the toolchain, optionally cleans, then builds every project in
dependency order, stopping at the first failure.
"""

from __future__ import annotations

from dataclasses import dataclass

from haulbuild.build.classify import render_line
from haulbuild.build.config import BuildConfig, ProjectSpec, Workspace, read_target_framework
from haulbuild.build.graph import build_order, dependents_of
from haulbuild.build.toolchain import DotnetToolchain, ToolchainError
from haulbuild.core.timing import StepTimings
from haulbuild.core.utils import INVOCATION_ERRORS, CommandResult, Logger, Style, format_cmd


@dataclass(frozen=True)
class BuildResult:
    """Outcome of building one project."""

    project: str
    success: bool
    exit_code: int
    duration: float = 0.0


# =============================================================================
# Build Orchestrator
# =============================================================================


class BuildOrchestrator:
    """Orchestrates the dependency-ordered build of every workspace project."""

    def __init__(
        self,
        config: BuildConfig,
        workspace: Workspace,
        toolchain: DotnetToolchain,
        log: Logger,
    ):
        self.config = config
        self.workspace = workspace
        self.toolchain = toolchain
        self.log = log

        self.order: list[ProjectSpec] = build_order(workspace.projects)
        self.results: dict[str, BuildResult] = {}
        self.timings = StepTimings()

    # -------------------------------------------------------------------------
    # Toolchain
    # -------------------------------------------------------------------------

    def check_toolchain(self) -> bool:
        """Fail-fast precondition: the toolchain must answer a version query."""
        log = self.log
        log.header("Checking toolchain")

        version = self.toolchain.version()
        if version is None:
            log.error(f"'{self.toolchain.executable}' was not found or is not working")
            log.info("Install the .NET SDK and make sure it is on PATH")
            return False

        log.success(f"{self.toolchain.executable} {version}")
        return True

    def show_toolchain_info(self) -> None:
        """Print installed SDKs, runtimes and framework details. Never fatal."""
        log = self.log
        log.header("Toolchain details")

        sections = [
            ("Installed SDKs", self.toolchain.list_sdks),
            ("Installed runtimes", self.toolchain.list_runtimes),
            ("Toolchain info", self.toolchain.info_lines),
        ]
        for title, query in sections:
            try:
                lines = query()
            except (ToolchainError, *INVOCATION_ERRORS) as e:
                log.warning(f"{title}: unavailable ({e})")
                continue

            log.info(f"{title}:")
            if not lines:
                log.dim("(none reported)")
            for line in lines:
                log.line(render_line(line, log.use_color))

    # -------------------------------------------------------------------------
    # Clean
    # -------------------------------------------------------------------------

    def clean_project(self, project: ProjectSpec) -> bool:
        """Clean one project. Failures are reported, never raised."""
        log = self.log
        path = self.workspace.project_path(project)

        if self.config.dry_run:
            command = self.toolchain.clean_command(path, self.config.configuration)
            log.info(f"[DRY-RUN] Would run: {format_cmd(command)}")
            return True

        try:
            result = self.toolchain.clean(path, self.config.configuration)
        except INVOCATION_ERRORS as e:
            log.warning(f"{project.name}: clean could not run: {e}")
            return False

        if not result.ok:
            log.warning(f"{project.name}: clean failed (exit code {result.returncode})")
            self._echo_output(result)
            return False

        log.success(f"{project.name}: cleaned")
        return True

    def clean_projects(self) -> None:
        """Clean every project. Best-effort: the run continues regardless."""
        self.log.header(f"Cleaning ({self.config.configuration})")
        with self.timings.measure("clean"):
            for project in self.order:
                self.clean_project(project)

    # -------------------------------------------------------------------------
    # Build
    # -------------------------------------------------------------------------

    def _echo_output(self, result: CommandResult) -> None:
        for line in result.output.splitlines():
            self.log.line(render_line(line, self.log.use_color))

    def _unmet_dependencies(self, project: ProjectSpec) -> list[str]:
        return [
            dep for dep in project.depends_on
            if not (dep in self.results and self.results[dep].success)
        ]

    def build_project(self, project: ProjectSpec) -> BuildResult:
        """Build one project and record its result."""
        log = self.log
        path = self.workspace.project_path(project)
        log.header(f"Building {project.name}")

        if not path.exists():
            log.warning(f"Project descriptor not found: {path}")

        framework = read_target_framework(path)
        if framework:
            log.info(f"Target framework: {framework}")

        key = f"build:{project.name}"
        with self.timings.measure(key):
            if self.config.dry_run:
                command = self.toolchain.build_command(
                    path, self.config.configuration, self.config.verbose
                )
                log.info(f"[DRY-RUN] Would run: {format_cmd(command)}")
                exit_code = 0
            else:
                try:
                    completed = self.toolchain.build(
                        path, self.config.configuration, self.config.verbose
                    )
                except INVOCATION_ERRORS as e:
                    log.error(f"{project.name}: build could not run: {e}")
                    exit_code = -1
                else:
                    self._echo_output(completed)
                    exit_code = completed.returncode

        result = BuildResult(
            project=project.name,
            success=exit_code == 0,
            exit_code=exit_code,
            duration=self.timings[key],
        )
        self.results[project.name] = result

        if result.success:
            log.success(f"{project.name}: built")
        else:
            log.error(f"{project.name}: build failed (exit code {exit_code})")
        return result

    def _report_failure(self, project: ProjectSpec) -> None:
        log = self.log
        blocked = dependents_of(project.name, self.order)
        if blocked:
            log.error(
                f"{project.name} must build successfully before "
                f"{', '.join(blocked)} can be built"
            )
        log.banner("BUILD FAILED", Style.FAILURE)

    # -------------------------------------------------------------------------
    # Summary
    # -------------------------------------------------------------------------

    def print_summary(self) -> None:
        log = self.log
        log.header("BUILD COMPLETE")
        for project in self.order:
            log.success(f"{project.name}: build succeeded")
        log.table_row("Configuration:", self.config.configuration, col1_width=16)
        log.table_row("Output:", str(self.workspace.output_path), col1_width=16)
        if self.config.verbose:
            log.dim(self.timings.summary())
        log.banner("All projects built successfully")

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------

    def run(self) -> int:
        """Run the whole pipeline. Returns the process exit status."""
        log = self.log
        log.header(f"haulbuild: {', '.join(p.name for p in self.order)}")
        log.info(f"Configuration: {self.config.configuration}")
        if self.config.dry_run:
            log.info("Dry run: clean and build commands will only be printed")

        if not self.check_toolchain():
            return 1

        self.show_toolchain_info()

        if self.config.clean:
            self.clean_projects()

        for project in self.order:
            unmet = self._unmet_dependencies(project)
            if unmet:
                log.error(f"{project.name}: dependencies not built: {', '.join(unmet)}")
                return 1

            result = self.build_project(project)
            if not result.success:
                self._report_failure(project)
                return 1

        self.print_summary()
        return 0
