# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for project graph construction and topological batching."""

from __future__ import annotations

from pathlib import Path

import pytest

from osdpm.errors import BootstrapPhase, CyclicDependencyError
from osdpm.graph import build_project_graph, find_cycle, topologically_batch_projects
from osdpm.project import Project


def _project(name: str, *, workspace: bool = False) -> Project:
    return Project(name=name, path=Path("/workspace") / name, is_workspace_project=workspace)


def _names(batches: list[list[Project]]) -> list[list[str]]:
    return [[project.name for project in batch] for batch in batches]


def _assert_valid_batching(projects: list[Project], graph: dict[str, tuple[str, ...]]) -> None:
    batches = topologically_batch_projects(projects, graph)
    index = {project.name: position for position, batch in enumerate(batches) for project in batch}
    flattened = [project.name for batch in batches for project in batch]
    assert sorted(flattened) == sorted(project.name for project in projects)
    assert len(flattened) == len(set(flattened))
    for dependent, dependencies in graph.items():
        for dependency in dependencies:
            assert index[dependency] < index[dependent]


def test_dependency_lands_in_earlier_batch() -> None:
    projects = [_project("plugin"), _project("core")]
    graph = {"plugin": ("core",), "core": ()}

    batches = topologically_batch_projects(projects, graph)

    assert _names(batches) == [["core"], ["plugin"]]


def test_independent_projects_share_one_batch_in_input_order() -> None:
    projects = [_project("c"), _project("a"), _project("b")]

    batches = topologically_batch_projects(projects, {})

    assert _names(batches) == [["c", "a", "b"]]


def test_project_is_placed_in_earliest_possible_batch() -> None:
    projects = [_project(name) for name in ("a", "b", "c", "d", "e")]
    graph = {"b": ("a",), "c": ("b",), "d": ("a",), "e": ()}

    batches = topologically_batch_projects(projects, graph)

    assert _names(batches) == [["a", "e"], ["b", "d"], ["c"]]


@pytest.mark.parametrize(
    "graph",
    [
        {},
        {"b": ("a",), "c": ("a", "b"), "d": ("c",)},
        {"a": ("b", "c"), "b": ("d",), "c": ("d",), "e": ("a", "d")},
        {"f": ("a",), "e": ("f",), "d": ("e",), "c": ("d",), "b": ("c",)},
    ],
)
def test_batches_respect_every_edge(graph: dict[str, tuple[str, ...]]) -> None:
    projects = [_project(name) for name in ("a", "b", "c", "d", "e", "f")]
    _assert_valid_batching(projects, graph)


def test_cycle_is_rejected_with_offending_chain() -> None:
    projects = [_project("a"), _project("b"), _project("c")]
    graph = {"a": ("b",), "b": ("c",), "c": ("a",)}

    with pytest.raises(CyclicDependencyError) as excinfo:
        topologically_batch_projects(projects, graph)

    cycle = excinfo.value.cycle
    assert cycle[0] == cycle[-1]
    assert set(cycle) == {"a", "b", "c"}
    assert excinfo.value.phase is BootstrapPhase.PREFLIGHT
    assert "a -> b -> c -> a" in str(excinfo.value)


def test_self_dependency_is_a_cycle() -> None:
    assert find_cycle(["a"], {"a": ("a",)}) == ["a", "a"]


def test_find_cycle_returns_none_for_acyclic_graph() -> None:
    assert find_cycle(["a", "b"], {"b": ("a",)}) is None


def test_edges_to_unknown_projects_do_not_gate_batching() -> None:
    projects = [_project("a")]

    batches = topologically_batch_projects(projects, {"a": ("external",)})

    assert _names(batches) == [["a"]]


def test_install_scope_ignores_workspace_project_edges() -> None:
    projects = [_project("root"), _project("member", workspace=True), _project("app")]
    graph = {"app": ("member",), "member": ("root",)}

    scoped = topologically_batch_projects(projects, graph, scope_to_installable_only=True)
    full = topologically_batch_projects(projects, graph)

    assert _names(scoped) == [["root", "member", "app"]]
    assert _names(full) == [["root"], ["member"], ["app"]]


def test_install_scope_still_checks_for_cycles() -> None:
    projects = [_project("a", workspace=True), _project("b")]

    with pytest.raises(CyclicDependencyError):
        topologically_batch_projects(
            projects,
            {"a": ("b",), "b": ("a",)},
            scope_to_installable_only=True,
        )


def test_build_project_graph_keeps_internal_dependencies_only() -> None:
    core = Project(name="core", path=Path("/w/core"), dependencies={"lodash": "^4.17.21"})
    plugin = Project(
        name="plugin",
        path=Path("/w/plugin"),
        dependencies={"core": "link:../core", "react": "^18.0.0", "plugin": "link:."},
    )

    graph = build_project_graph({"core": core, "plugin": plugin})

    assert graph == {"core": (), "plugin": ("core",)}
