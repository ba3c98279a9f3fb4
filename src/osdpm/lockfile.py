# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Reader for yarn v1 lockfiles and single-version validation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeAlias

from .errors import ConfigError, LockValidationError
from .project import Project


@dataclass(frozen=True, slots=True)
class LockEntry:
    """Resolved package information for one or more lockfile selectors."""

    name: str
    version: str
    resolved: str | None = None
    dependencies: Mapping[str, str] = field(default_factory=dict)


YarnLock: TypeAlias = dict[str, LockEntry]


def package_name_from_selector(selector: str) -> str:
    """Return the package name of a ``name@range`` lockfile selector.

    Args:
        selector: Selector such as ``lodash@^4.17.0`` or ``@scope/pkg@1.0.0``.

    Returns:
        str: Package name without the version range.
    """

    index = selector.rfind("@")
    if index <= 0:
        return selector
    return selector[:index]


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def _split_pair(line: str) -> tuple[str, str]:
    stripped = line.strip()
    if stripped.startswith('"'):
        closing = stripped.index('"', 1)
        return stripped[1:closing], _unquote(stripped[closing + 1 :])
    key, _, value = stripped.partition(" ")
    return key, _unquote(value)


@dataclass(slots=True)
class _PendingEntry:
    selectors: list[str]
    fields: dict[str, str] = field(default_factory=dict)
    dependencies: dict[str, str] = field(default_factory=dict)


def parse_yarn_lock(content: str) -> YarnLock:
    """Parse yarn v1 lockfile ``content`` into entries keyed by selector.

    Args:
        content: Lockfile text.

    Returns:
        YarnLock: Mapping from every selector to its resolved entry.

    Raises:
        ConfigError: If an entry lacks a ``version`` field.
    """

    entries: list[_PendingEntry] = []
    current: _PendingEntry | None = None
    in_dependencies = False
    for raw in content.splitlines():
        if not raw.strip() or raw.lstrip().startswith("#"):
            continue
        indent = len(raw) - len(raw.lstrip(" "))
        if indent == 0:
            selectors = [_unquote(part) for part in raw.rstrip().rstrip(":").split(",")]
            current = _PendingEntry(selectors=[selector for selector in selectors if selector])
            entries.append(current)
            in_dependencies = False
        elif current is None:
            continue
        elif indent == 2:
            stripped = raw.strip()
            in_dependencies = stripped.endswith(":")
            if not in_dependencies:
                key, value = _split_pair(stripped)
                current.fields[key] = value
        elif in_dependencies:
            key, value = _split_pair(raw)
            current.dependencies[key] = value

    lock: YarnLock = {}
    for pending in entries:
        version = pending.fields.get("version")
        if version is None:
            raise ConfigError(f"Lockfile entry {', '.join(pending.selectors)} has no version")
        entry = LockEntry(
            name=package_name_from_selector(pending.selectors[0]),
            version=version,
            resolved=pending.fields.get("resolved"),
            dependencies=pending.dependencies,
        )
        for selector in pending.selectors:
            lock[selector] = entry
    return lock


def read_yarn_lock(path: Path) -> YarnLock:
    """Read and parse the lockfile at ``path``; a missing file yields ``{}``."""

    if not path.is_file():
        return {}
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read lockfile {path}: {exc}") from exc
    return parse_yarn_lock(content)


def resolve_dependency_versions(project: Project, lock: YarnLock) -> dict[str, str | None]:
    """Return the locked version of each dependency declared by ``project``.

    Dependencies without a lock entry (including internal projects linked
    from the workspace) map to ``None``.
    """

    resolved: dict[str, str | None] = {}
    for name, version_range in sorted(project.dependencies.items()):
        entry = lock.get(f"{name}@{version_range}")
        resolved[name] = entry.version if entry is not None else None
    return resolved


def collect_versions(lock: YarnLock, package: str) -> list[str]:
    """Return the distinct resolved versions of ``package`` (case-insensitive)."""

    target = package.lower()
    versions = {entry.version for entry in lock.values() if entry.name.lower() == target}
    return sorted(versions)


def validate_single_version(lock: YarnLock, package: str | None) -> None:
    """Ensure ``package`` resolves to exactly one version in ``lock``.

    Args:
        lock: Parsed lock information.
        package: Package name to check, ``None`` to skip validation.

    Raises:
        LockValidationError: If several distinct versions are locked.
    """

    if not package:
        return
    versions = collect_versions(lock, package)
    if len(versions) > 1:
        raise LockValidationError(
            f"Multiple versions of [{package}] are locked ({', '.join(versions)}); "
            "a single version is required.",
        )


__all__ = [
    "LockEntry",
    "YarnLock",
    "collect_versions",
    "package_name_from_selector",
    "parse_yarn_lock",
    "read_yarn_lock",
    "resolve_dependency_versions",
    "validate_single_version",
]
