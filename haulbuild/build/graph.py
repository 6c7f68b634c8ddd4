"""Dependency ordering for build units, backed by graphlib."""

from __future__ import annotations

from graphlib import CycleError, TopologicalSorter
from typing import Iterable, Sequence

from haulbuild.build.config import ConfigError, ProjectSpec


def _graph(projects: Sequence[ProjectSpec]) -> dict[str, tuple[str, ...]]:
    names = {project.name for project in projects}
    graph: dict[str, tuple[str, ...]] = {}
    for project in projects:
        for dep in project.depends_on:
            if dep not in names:
                raise ConfigError(f"{project.name} depends on unknown project '{dep}'")
            if dep == project.name:
                raise ConfigError(f"{project.name} depends on itself")
        graph[project.name] = project.depends_on
    return graph


def build_order(projects: Sequence[ProjectSpec]) -> list[ProjectSpec]:
    """Return projects so every dependency precedes its dependents.

    Projects that become ready together keep their declaration order.

    Raises:
        ConfigError: On unknown dependencies or dependency cycles.
    """
    graph = _graph(projects)
    position = {project.name: index for index, project in enumerate(projects)}
    by_name = {project.name: project for project in projects}

    sorter = TopologicalSorter(graph)
    try:
        sorter.prepare()
    except CycleError as e:
        cycle = " -> ".join(e.args[1]) if len(e.args) > 1 else "unknown"
        raise ConfigError(f"Dependency cycle between projects: {cycle}") from e

    ordered: list[ProjectSpec] = []
    while sorter.is_active():
        ready = sorted(sorter.get_ready(), key=position.__getitem__)
        for name in ready:
            ordered.append(by_name[name])
            sorter.done(name)
    return ordered


def dependents_of(name: str, projects: Iterable[ProjectSpec]) -> list[str]:
    """Names of projects that depend on ``name``, directly or transitively."""
    projects = list(projects)
    found: list[str] = []
    frontier = [name]
    while frontier:
        current = frontier.pop(0)
        for project in projects:
            if current in project.depends_on and project.name not in found:
                found.append(project.name)
                frontier.append(project.name)
    return found
