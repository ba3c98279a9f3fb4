# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Content fingerprints for the inputs of a project's bootstrap step."""

from __future__ import annotations

import hashlib
import json
import os
from collections.abc import Iterable, Mapping, Sequence
from fnmatch import fnmatch
from pathlib import Path
from typing import Final, TypeAlias

from .graph import ProjectGraph
from .lockfile import YarnLock, resolve_dependency_versions
from .project import Project

Fingerprint: TypeAlias = str

_CHUNK_SIZE: Final[int] = 1 << 16


def hash_file(path: Path) -> str:
    """Return the SHA-1 hex digest of the bytes stored at ``path``."""

    digest = hashlib.sha1(usedforsecurity=False)
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _is_ignored(name: str, relative: str, patterns: Sequence[str]) -> bool:
    return any(fnmatch(name, pattern) or fnmatch(relative, pattern) for pattern in patterns)


def iter_project_files(
    root: Path,
    ignore_patterns: Sequence[str],
    *,
    excluded_dirs: Iterable[Path] = (),
) -> list[tuple[str, Path]]:
    """Return ``(relative posix path, absolute path)`` pairs under ``root``.

    Args:
        root: Directory to scan.
        ignore_patterns: fnmatch patterns matched against each entry name and
            its path relative to ``root``; matching directories are pruned.
        excluded_dirs: Absolute directories skipped entirely, used for nested
            projects that own their files.

    Returns:
        list[tuple[str, Path]]: Files sorted by relative path.
    """

    excluded = {path.resolve() for path in excluded_dirs}
    collected: list[tuple[str, Path]] = []
    for current, dirnames, filenames in os.walk(root):
        current_path = Path(current)
        kept: list[str] = []
        for dirname in dirnames:
            candidate = current_path / dirname
            relative = candidate.relative_to(root).as_posix()
            if candidate.resolve() in excluded or _is_ignored(dirname, relative, ignore_patterns):
                continue
            kept.append(dirname)
        dirnames[:] = kept
        for filename in filenames:
            candidate = current_path / filename
            relative = candidate.relative_to(root).as_posix()
            if _is_ignored(filename, relative, ignore_patterns) or not candidate.is_file():
                continue
            collected.append((relative, candidate))
    collected.sort(key=lambda item: item[0])
    return collected


class FingerprintComputer:
    """Compute order-independent fingerprints for workspace projects.

    A fingerprint covers every non-ignored file below the project root
    (relative path and content hash), the locked versions of the declared
    dependencies, and the fingerprints of the internal projects it depends on.
    """

    def __init__(
        self,
        projects: Mapping[str, Project],
        graph: ProjectGraph,
        lock: YarnLock,
        *,
        ignore_patterns: Sequence[str],
    ) -> None:
        self._projects = projects
        self._graph = graph
        self._lock = lock
        self._ignore_patterns = tuple(ignore_patterns)
        self._computed: dict[str, Fingerprint] = {}

    def _nested_project_dirs(self, project: Project) -> list[Path]:
        return [
            other.path
            for other in self._projects.values()
            if other.name != project.name and other.path != project.path and other.path.is_relative_to(project.path)
        ]

    def compute(self, project: Project) -> Fingerprint:
        """Return the fingerprint of ``project``.

        Args:
            project: Project whose bootstrap inputs are fingerprinted.

        Returns:
            Fingerprint: Hex digest that changes whenever any input byte,
            input path, locked dependency version, or internal dependency
            fingerprint changes.
        """

        cached = self._computed.get(project.name)
        if cached is not None:
            return cached
        files = [
            [relative, hash_file(path)]
            for relative, path in iter_project_files(
                project.path,
                self._ignore_patterns,
                excluded_dirs=self._nested_project_dirs(project),
            )
        ]
        internal = {
            name: self.compute(self._projects[name])
            for name in sorted(self._graph.get(project.name, ()))
            if name in self._projects
        }
        payload = {
            "files": files,
            "dependencies": resolve_dependency_versions(project, self._lock),
            "internal": internal,
        }
        digest = hashlib.sha1(usedforsecurity=False)
        digest.update(json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8"))
        fingerprint = digest.hexdigest()
        self._computed[project.name] = fingerprint
        return fingerprint


__all__ = ["Fingerprint", "FingerprintComputer", "hash_file", "iter_project_files"]
