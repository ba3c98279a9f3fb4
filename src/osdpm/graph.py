# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Dependency graph construction and topological batching of projects.

The graph maps a project name to the names of the projects it depends on
(dependent -> dependency). Batching peels the graph layer by layer: a batch
holds every project whose remaining dependencies were all placed in earlier
batches, so each project lands in the earliest batch it can run in.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import TypeAlias

from .errors import CyclicDependencyError
from .project import Project

ProjectGraph: TypeAlias = Mapping[str, Sequence[str]]
Batch: TypeAlias = list[Project]


def build_project_graph(projects: Mapping[str, Project]) -> dict[str, tuple[str, ...]]:
    """Return the internal dependency edges between ``projects``.

    Args:
        projects: Projects keyed by name.

    Returns:
        dict[str, tuple[str, ...]]: For each project, the names of the other
        loaded projects it declares as dependencies, in declaration order.
    """

    return {
        name: tuple(dep for dep in project.dependencies if dep in projects and dep != name)
        for name, project in projects.items()
    }


def find_cycle(names: Sequence[str], graph: ProjectGraph) -> list[str] | None:
    """Return one dependency cycle among ``names`` or ``None`` when acyclic.

    Args:
        names: Node names to inspect, in stable order.
        graph: Dependency edges; edges to names outside ``names`` are ignored.

    Returns:
        list[str] | None: Names forming the cycle with the first name
        repeated at the end, or ``None``.
    """

    known = set(names)
    state: dict[str, int] = {}  # 1 = on the current path, 2 = finished
    for start in names:
        if start in state:
            continue
        path: list[str] = [start]
        iterators = [iter(graph.get(start, ()))]
        state[start] = 1
        while iterators:
            node = path[-1]
            child = next((dep for dep in iterators[-1] if dep in known), None)
            if child is None:
                state[node] = 2
                path.pop()
                iterators.pop()
                continue
            child_state = state.get(child)
            if child_state == 1:
                return [*path[path.index(child) :], child]
            if child_state is None:
                state[child] = 1
                path.append(child)
                iterators.append(iter(graph.get(child, ())))
    return None


def _gates(dependent: Project, dependency: Project, *, scope_to_installable_only: bool) -> bool:
    if not scope_to_installable_only:
        return True
    return not (dependent.is_workspace_project or dependency.is_workspace_project)


def topologically_batch_projects(
    projects: Mapping[str, Project] | Iterable[Project],
    graph: ProjectGraph,
    *,
    scope_to_installable_only: bool = False,
) -> list[Batch]:
    """Group ``projects`` into batches that respect dependency order.

    Args:
        projects: Projects to batch; their order is kept inside each batch.
        graph: Dependency edges keyed by project name.
        scope_to_installable_only: When ``True`` edges into or out of
            workspace projects never delay a batch.

    Returns:
        list[Batch]: Batches in execution order. Every project appears in
        exactly one batch, after the batches holding its dependencies.

    Raises:
        CyclicDependencyError: If the graph restricted to ``projects``
            contains a cycle. Nothing is batched in that case.
    """

    ordered = list(projects.values()) if isinstance(projects, Mapping) else list(projects)
    by_name = {project.name: project for project in ordered}
    cycle = find_cycle(list(by_name), graph)
    if cycle is not None:
        raise CyclicDependencyError(cycle)

    unresolved: dict[str, set[str]] = {}
    for project in ordered:
        unresolved[project.name] = {
            dep
            for dep in graph.get(project.name, ())
            if dep in by_name
            and dep != project.name
            and _gates(project, by_name[dep], scope_to_installable_only=scope_to_installable_only)
        }

    batches: list[Batch] = []
    remaining = ordered
    while remaining:
        batch = [project for project in remaining if not unresolved[project.name]]
        if not batch:  # pragma: no cover - excluded by the cycle check above
            raise CyclicDependencyError(find_cycle([p.name for p in remaining], graph) or [])
        batches.append(batch)
        placed = {project.name for project in batch}
        remaining = [project for project in remaining if project.name not in placed]
        for project in remaining:
            unresolved[project.name] -= placed
    return batches


__all__ = [
    "Batch",
    "ProjectGraph",
    "build_project_graph",
    "find_cycle",
    "topologically_batch_projects",
]
