# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from osdpm.project import Project

WriteProject = Callable[..., Project]


def write_manifest(directory: Path, payload: Mapping[str, Any]) -> Path:
    """Write ``payload`` as ``package.json`` inside ``directory``."""

    directory.mkdir(parents=True, exist_ok=True)
    manifest = directory / "package.json"
    manifest.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return manifest


@pytest.fixture
def write_project(tmp_path: Path) -> WriteProject:
    """Return a factory creating a project directory and its record."""

    def factory(
        name: str,
        *,
        dependencies: Mapping[str, str] | None = None,
        scripts: Mapping[str, str] | None = None,
        build_targets: Sequence[str] | None = None,
        directory: str | None = None,
        files: Mapping[str, str] | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> Project:
        root = tmp_path / (directory or f"packages/{name}")
        payload: dict[str, Any] = {"name": name, "version": "1.0.0"}
        if dependencies:
            payload["dependencies"] = dict(dependencies)
        if scripts:
            payload["scripts"] = dict(scripts)
        if build_targets:
            payload["osd"] = {"buildTargets": list(build_targets)}
        payload.update(extra or {})
        write_manifest(root, payload)
        for relative, content in (files or {"src/index.js": f"export const name = '{name}';\n"}).items():
            target = root / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return Project.from_path(root)

    return factory


@dataclass
class RecordingInvoker:
    """Invoker double that records calls instead of running yarn."""

    install_failures: dict[str, Exception] = field(default_factory=dict)
    build_failures: dict[str, Exception] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)
    extra_args: list[tuple[str, ...]] = field(default_factory=list)
    source_maps: list[bool] = field(default_factory=list)
    delay: float = 0.0
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def _record(self, kind: str, project: Project) -> None:
        with self._lock:
            self.calls.append((kind, project.name))

    def install_dependencies(self, project: Project, *, extra_args: Sequence[str] = ()) -> None:
        self._record("install", project)
        with self._lock:
            self.extra_args.append(tuple(extra_args))
        failure = self.install_failures.get(project.name)
        if failure is not None:
            raise failure

    def run_script(self, project: Project, script: str) -> None:
        self._record(f"script:{script}", project)
        self._maybe_fail(project)

    def build_for_targets(self, project: Project, *, source_maps: bool) -> None:
        self._record("targets", project)
        with self._lock:
            self.source_maps.append(source_maps)
        self._maybe_fail(project)

    def _maybe_fail(self, project: Project) -> None:
        failure = self.build_failures.get(project.name)
        if failure is None:
            return
        if self.delay:
            time.sleep(self.delay)
        raise failure

    def names(self, kind: str) -> list[str]:
        """Return the projects recorded for ``kind`` in call order."""

        return [name for recorded, name in self.calls if recorded == kind]


@pytest.fixture
def invoker() -> RecordingInvoker:
    return RecordingInvoker()
