# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Discovery of workspace projects from directory globs."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from .errors import ConfigError
from .project import MANIFEST_FILENAME, Project


def _expand_glob(root: Path, pattern: str) -> list[Path]:
    if pattern in {"", "."}:
        return [root]
    return sorted(candidate for candidate in root.glob(pattern) if candidate.is_dir())


def _iter_project_dirs(root: Path, patterns: Iterable[str]) -> Iterable[Path]:
    seen: set[Path] = set()
    for pattern in patterns:
        for candidate in _expand_glob(root, pattern):
            resolved = candidate.resolve()
            if resolved in seen or not (resolved / MANIFEST_FILENAME).is_file():
                continue
            seen.add(resolved)
            yield resolved


def get_projects(root: Path, project_globs: Sequence[str]) -> dict[str, Project]:
    """Return every project found under ``root`` keyed by name.

    Projects keep the order in which the globs discover them. Members of a
    workspace root's ``workspaces`` globs are flagged as workspace projects.

    Args:
        root: Workspace root directory.
        project_globs: Glob patterns relative to ``root`` that locate projects.

    Returns:
        dict[str, Project]: Discovered projects in discovery order.

    Raises:
        ConfigError: If two projects share the same name.
    """

    root = root.resolve()
    projects: dict[str, Project] = {}
    for directory in _iter_project_dirs(root, project_globs):
        project = Project.from_path(directory)
        existing = projects.get(project.name)
        if existing is not None:
            raise ConfigError(
                f"There are multiple projects with the same name [{project.name}]: "
                f"{existing.path} and {project.path}",
            )
        projects[project.name] = project
    return _flag_workspace_members(projects)


def _flag_workspace_members(projects: dict[str, Project]) -> dict[str, Project]:
    members: set[Path] = set()
    for project in projects.values():
        if not project.is_workspace_root:
            continue
        for directory in _iter_project_dirs(project.path, project.workspaces):
            if directory != project.path:
                members.add(directory)
    return {
        name: project.as_workspace_project() if project.path in members else project
        for name, project in projects.items()
    }


__all__ = ["get_projects"]
