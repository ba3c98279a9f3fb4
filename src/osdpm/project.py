# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Project records loaded from ``package.json`` manifests."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Final

from .errors import ConfigError

MANIFEST_FILENAME: Final[str] = "package.json"
BOOTSTRAP_SCRIPT: Final[str] = "osd:bootstrap"
TARGET_DIRNAME: Final[str] = "target"


@dataclass(frozen=True, slots=True)
class Project:
    """Immutable description of one workspace project.

    Attributes:
        name: Unique package name.
        path: Project root directory.
        dependencies: Declared dependency ranges keyed by package name,
            merging ``dependencies`` and ``devDependencies``.
        scripts: Declared ``package.json`` scripts.
        bin: Executables exposed by the project, keyed by command name.
        build_targets: Explicit build targets declared under ``osd.buildTargets``.
        workspaces: Workspace globs when the project is a workspace root.
        is_workspace_project: ``True`` when the project is installed through
            its workspace root and has no install step of its own.
    """

    name: str
    path: Path
    dependencies: Mapping[str, str] = field(default_factory=dict)
    scripts: Mapping[str, str] = field(default_factory=dict)
    bin: Mapping[str, str] = field(default_factory=dict)
    build_targets: tuple[str, ...] = ()
    workspaces: tuple[str, ...] = ()
    is_workspace_project: bool = False

    @classmethod
    def from_path(cls, path: Path) -> Project:
        """Load the project rooted at ``path`` from its manifest.

        Args:
            path: Directory containing ``package.json``.

        Returns:
            Project: Parsed project record.

        Raises:
            ConfigError: If the manifest is missing, malformed, or unnamed.
        """

        manifest = path / MANIFEST_FILENAME
        try:
            payload = json.loads(manifest.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Unable to read {manifest}: {exc}") from exc
        if not isinstance(payload, dict):
            raise ConfigError(f"{manifest} must contain a JSON object")
        return cls.from_manifest(payload, path)

    @classmethod
    def from_manifest(cls, payload: Mapping[str, Any], path: Path) -> Project:
        """Build a project from an already parsed manifest payload."""

        name = payload.get("name")
        if not isinstance(name, str) or not name:
            raise ConfigError(f"Project at {path} has no name in {MANIFEST_FILENAME}")
        dependencies = {
            **_string_mapping(payload.get("devDependencies")),
            **_string_mapping(payload.get("dependencies")),
        }
        osd_section = payload.get("osd")
        build_targets: tuple[str, ...] = ()
        if isinstance(osd_section, Mapping):
            build_targets = _string_tuple(osd_section.get("buildTargets"))
        workspaces = payload.get("workspaces")
        if isinstance(workspaces, Mapping):
            workspaces = workspaces.get("packages")
        return cls(
            name=name,
            path=path.resolve(),
            dependencies=dependencies,
            scripts=_string_mapping(payload.get("scripts")),
            bin=_bin_mapping(name, payload.get("bin")),
            build_targets=build_targets,
            workspaces=_string_tuple(workspaces),
        )

    @property
    def is_workspace_root(self) -> bool:
        return bool(self.workspaces)

    @property
    def target_location(self) -> Path:
        """Return the directory holding derived artefacts for the project."""

        return self.path / TARGET_DIRNAME

    def has_dependencies(self) -> bool:
        return bool(self.dependencies)

    def has_script(self, name: str) -> bool:
        return name in self.scripts

    def has_build_targets(self) -> bool:
        return bool(self.build_targets)

    def needs_bootstrap(self) -> bool:
        """Return whether the project declares a bootstrap step at all."""

        return self.has_script(BOOTSTRAP_SCRIPT) or self.has_build_targets()

    def as_workspace_project(self) -> Project:
        return replace(self, is_workspace_project=True)


def _string_mapping(value: object) -> dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    return {str(key): str(entry) for key, entry in value.items() if isinstance(entry, str)}


def _string_tuple(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list | tuple):
        return tuple(entry for entry in value if isinstance(entry, str))
    return ()


def _bin_mapping(name: str, value: object) -> dict[str, str]:
    # A bare string binds the executable to the unscoped package name.
    if isinstance(value, str):
        return {name.rsplit("/", 1)[-1]: value}
    return _string_mapping(value)


__all__ = ["BOOTSTRAP_SCRIPT", "MANIFEST_FILENAME", "Project"]
