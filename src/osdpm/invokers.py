# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Package-manager invocations for installing and building projects."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from subprocess import CompletedProcess
from typing import Protocol, runtime_checkable

from .process_utils import run_command
from .project import BOOTSTRAP_SCRIPT, Project

CommandRunner = Callable[..., CompletedProcess[str]]


@runtime_checkable
class ProjectInvoker(Protocol):
    """Operations the orchestrator delegates to the package manager."""

    def install_dependencies(self, project: Project, *, extra_args: Sequence[str] = ()) -> None:
        """Install the external dependencies declared by ``project``."""

        raise NotImplementedError

    def run_script(self, project: Project, script: str) -> None:
        """Run the manifest script ``script`` inside ``project``."""

        raise NotImplementedError

    def build_for_targets(self, project: Project, *, source_maps: bool) -> None:
        """Build every explicit build target declared by ``project``."""

        raise NotImplementedError


@dataclass(slots=True)
class YarnInvoker:
    """Invoke ``yarn`` for installs, scripts, and build targets.

    Attributes:
        executable: Name or absolute path of the yarn executable.
        runner: Callable executing commands; defaults to :func:`run_command`.
    """

    executable: str = "yarn"
    runner: CommandRunner = field(default=run_command)

    def _run(self, args: Sequence[str], cwd: Path) -> None:
        self.runner([self.executable, *args], cwd=cwd)

    def install_dependencies(self, project: Project, *, extra_args: Sequence[str] = ()) -> None:
        self._run(["install", "--non-interactive", *extra_args], project.path)

    def run_script(self, project: Project, script: str = BOOTSTRAP_SCRIPT) -> None:
        self._run(["run", script], project.path)

    def build_for_targets(self, project: Project, *, source_maps: bool) -> None:
        for target in project.build_targets:
            args = ["run", "osd:build", "--target", target]
            if source_maps:
                args.append("--source-maps")
            self._run(args, project.path)


__all__ = ["CommandRunner", "ProjectInvoker", "YarnInvoker"]
