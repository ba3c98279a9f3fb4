# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Symlink executables of internal dependencies into their dependents."""

from __future__ import annotations

import os
import stat
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

from .errors import LinkError
from .graph import ProjectGraph
from .project import Project


@dataclass(frozen=True, slots=True)
class LinkedExecutable:
    """Describe one executable symlink created for a dependent project."""

    project: str
    command: str
    link: Path
    target: Path


def _make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def _create_symlink(target: Path, link: Path) -> None:
    link.parent.mkdir(parents=True, exist_ok=True)
    if link.is_symlink() or link.exists():
        link.unlink()
    os.symlink(os.path.relpath(target, link.parent), link)


def link_project_executables(
    projects: Mapping[str, Project],
    graph: ProjectGraph,
    *,
    debug_logger: Callable[[str], None] | None = None,
) -> list[LinkedExecutable]:
    """Expose every ``bin`` entry of internal dependencies to their dependents.

    Each executable lands in ``<dependent>/node_modules/.bin/<command>`` as a
    relative symlink and its target is marked executable. Executables that
    do not exist yet, typically output of the dependency's own bootstrap
    step, are skipped and picked up by a later run.

    Args:
        projects: Projects keyed by name.
        graph: Dependency edges keyed by project name.
        debug_logger: Optional callable told about skipped executables.

    Returns:
        list[LinkedExecutable]: Links created, in project order.

    Raises:
        LinkError: If a link cannot be created.
    """

    linked: list[LinkedExecutable] = []
    for name, project in projects.items():
        bin_dir = project.path / "node_modules" / ".bin"
        for dep_name in graph.get(name, ()):
            dependency = projects.get(dep_name)
            if dependency is None:
                continue
            for command, relative in dependency.bin.items():
                target = (dependency.path / relative).resolve()
                if not target.is_file():
                    if debug_logger:
                        debug_logger(f"[{name}] not linking [{command}] of [{dep_name}]: {target} does not exist yet")
                    continue
                link = bin_dir / command
                try:
                    _create_symlink(target, link)
                    _make_executable(target)
                except OSError as exc:
                    raise LinkError(f"Unable to link [{command}] from [{dep_name}]: {exc}", project=name) from exc
                linked.append(LinkedExecutable(project=name, command=command, link=link, target=target))
    return linked


__all__ = ["LinkedExecutable", "link_project_executables"]
