"""
Build configuration for haulbuild.

Constants, dataclasses, workspace loading, and project descriptor inspection.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIGURATION",
    "DEFAULT_TOOLCHAIN",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_PROJECTS",
    "ConfigError",
    "BuildConfig",
    "ProjectSpec",
    "Workspace",
    "load_workspace",
    "read_target_framework",
]

# =============================================================================
# Constants
# =============================================================================

CONFIG_FILENAME = "haulbuild.yaml"

DEFAULT_CONFIGURATION = "Debug"
DEFAULT_TOOLCHAIN = "dotnet"

# Where the toolchain drops the compiled assemblies, relative to the workspace root
DEFAULT_OUTPUT_DIR = "1.6/Assemblies"

TARGET_FRAMEWORK_PATTERN = re.compile(
    r"<(TargetFrameworks?|TargetFrameworkVersion)>\s*([^<]+?)\s*</\1>"
)


class ConfigError(RuntimeError):
    """Raised when the workspace configuration is invalid."""


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class BuildConfig:
    """Options for a single build run, fixed once parsed from the command line."""

    configuration: str = DEFAULT_CONFIGURATION
    clean: bool = False
    verbose: bool = False
    dry_run: bool = False


@dataclass(frozen=True)
class ProjectSpec:
    """A buildable project descriptor and the projects it depends on."""

    name: str
    path: Path
    depends_on: tuple[str, ...] = ()


DEFAULT_PROJECTS: tuple[ProjectSpec, ...] = (
    ProjectSpec(
        name="IHoldMultipleThings",
        path=Path("Source/IHoldMultipleThings/IHoldMultipleThings.csproj"),
    ),
    ProjectSpec(
        name="PickUpAndHaul",
        path=Path("Source/PickUpAndHaul/PickUpAndHaul.csproj"),
        depends_on=("IHoldMultipleThings",),
    ),
)


@dataclass(frozen=True)
class Workspace:
    """Resolved workspace layout: where projects live and where output lands."""

    root: Path
    toolchain: str = DEFAULT_TOOLCHAIN
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    projects: tuple[ProjectSpec, ...] = field(default_factory=tuple)

    @property
    def output_path(self) -> Path:
        return self.root / self.output_dir

    def project_path(self, project: ProjectSpec) -> Path:
        """Absolute path of a project descriptor."""
        return project.path if project.path.is_absolute() else self.root / project.path


# =============================================================================
# Workspace Loading
# =============================================================================


def _load_yaml_payload(path: Path) -> dict[str, Any]:
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"{path.name} is not valid YAML: {e}") from e
    except OSError as e:
        raise ConfigError(f"Could not read {path}: {e}") from e

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the top level")
    return payload


def _parse_projects(raw: Any, source: Path) -> tuple[ProjectSpec, ...]:
    if not isinstance(raw, list) or not raw:
        raise ConfigError(f"'projects' in {source.name} must be a non-empty list")

    projects: list[ProjectSpec] = []
    seen: set[str] = set()
    for index, item in enumerate(raw):
        where = f"projects[{index}] in {source.name}"
        if not isinstance(item, dict):
            raise ConfigError(f"{where} must be a mapping")

        name = item.get("name")
        path = item.get("path")
        if not name or not path:
            raise ConfigError(f"{where} needs both 'name' and 'path'")
        if not isinstance(name, (str, int, float)) or not isinstance(path, (str, int, float)):
            raise ConfigError(f"{where}: 'name' and 'path' must be plain strings")

        name = str(name)
        if name in seen:
            raise ConfigError(f"Duplicate project name '{name}' in {source.name}")
        seen.add(name)

        depends_on = item.get("depends_on") or []
        if isinstance(depends_on, str):
            depends_on = [depends_on]
        if not isinstance(depends_on, list) or not all(isinstance(dep, str) for dep in depends_on):
            raise ConfigError(f"{where}: 'depends_on' must be a name or a list of names")

        projects.append(
            ProjectSpec(
                name=name,
                path=Path(str(path)),
                depends_on=tuple(depends_on),
            )
        )

    return tuple(projects)


def load_workspace(root: Path, config_path: Optional[Path] = None) -> Workspace:
    """Resolve the workspace layout rooted at ``root``.

    Reads ``config_path`` (or ``haulbuild.yaml`` in ``root`` when present) and
    falls back to the built-in two-project layout for anything it omits.

    Raises:
        ConfigError: If an explicit config file is missing or any file is invalid.
    """
    root = root.resolve()

    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        source: Optional[Path] = config_path
    else:
        candidate = root / CONFIG_FILENAME
        source = candidate if candidate.exists() else None

    if source is None:
        return Workspace(root=root, projects=DEFAULT_PROJECTS)

    payload = _load_yaml_payload(source)

    projects = DEFAULT_PROJECTS
    if "projects" in payload:
        projects = _parse_projects(payload["projects"], source)

    return Workspace(
        root=root,
        toolchain=str(payload.get("toolchain") or DEFAULT_TOOLCHAIN),
        output_dir=Path(str(payload.get("output_dir") or DEFAULT_OUTPUT_DIR)),
        projects=projects,
    )


# =============================================================================
# Project Descriptor Inspection
# =============================================================================


def read_target_framework(path: Path) -> Optional[str]:
    """Return the target framework declared in a project descriptor, if any."""
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None

    match = TARGET_FRAMEWORK_PATTERN.search(content)
    if match is None:
        return None
    return match.group(2)
