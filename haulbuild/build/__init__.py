"""
haulbuild.build - Build orchestration for the PickUpAndHaul solution.

Provides dependency-ordered dotnet builds with output colorization
and fail-fast gating.
"""

from haulbuild.build.config import (
    CONFIG_FILENAME,
    DEFAULT_CONFIGURATION,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PROJECTS,
    DEFAULT_TOOLCHAIN,
    BuildConfig,
    ConfigError,
    ProjectSpec,
    Workspace,
    load_workspace,
    read_target_framework,
)
from haulbuild.build.classify import (
    LineCategory,
    classify_line,
    render_line,
)
from haulbuild.build.graph import build_order, dependents_of
from haulbuild.build.toolchain import DotnetToolchain, ToolchainError
from haulbuild.build.orchestrator import BuildOrchestrator, BuildResult

__all__ = [
    # Constants
    "CONFIG_FILENAME",
    "DEFAULT_CONFIGURATION",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_PROJECTS",
    "DEFAULT_TOOLCHAIN",
    # Data classes
    "BuildConfig",
    "ProjectSpec",
    "Workspace",
    "BuildResult",
    # Errors
    "ConfigError",
    "ToolchainError",
    # Functions
    "load_workspace",
    "read_target_framework",
    "classify_line",
    "render_line",
    "build_order",
    "dependents_of",
    "LineCategory",
    # Orchestrator
    "DotnetToolchain",
    "BuildOrchestrator",
]
