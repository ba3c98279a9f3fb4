# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for the workspace bootstrap command."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

CONFIG_FILENAME: Final[str] = ".osdpm.toml"
DEFAULT_LOCKFILE: Final[str] = "yarn.lock"
DEFAULT_PROJECT_GLOBS: Final[tuple[str, ...]] = (".", "packages/*", "plugins/*")
DEFAULT_IGNORE_PATTERNS: Final[tuple[str, ...]] = (
    "node_modules",
    "target",
    "build",
    ".git",
    ".cache",
    "*.log",
)
DEFAULT_CONCURRENCY: Final[int] = 4


class BootstrapOptions(BaseModel):
    """Options recognised by :func:`osdpm.bootstrap.bootstrap`."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    cache: bool = True
    frozen_lockfile: bool = False
    prefer_offline: bool = False
    single_version: str | None = None
    concurrency: int | None = Field(default=DEFAULT_CONCURRENCY, ge=1)
    source_maps: bool = True
    ignore_patterns: tuple[str, ...] = DEFAULT_IGNORE_PATTERNS

    @field_validator("single_version", mode="before")
    @classmethod
    def _normalise_single_version(cls, value: object) -> object:
        """Lower-case the single-version package name and drop blank values."""

        if isinstance(value, str):
            stripped = value.strip().lower()
            return stripped or None
        return value

    def extra_args(self) -> tuple[str, ...]:
        """Return the pass-through flags appended to install invocations.

        Returns:
            tuple[str, ...]: ``--frozen-lockfile`` and ``--prefer-offline``
            when the corresponding options are enabled.
        """

        args: list[str] = []
        if self.frozen_lockfile:
            args.append("--frozen-lockfile")
        if self.prefer_offline:
            args.append("--prefer-offline")
        return tuple(args)


class WorkspaceConfig(BaseModel):
    """Workspace level settings read from ``.osdpm.toml``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    projects: tuple[str, ...] = DEFAULT_PROJECT_GLOBS
    lockfile: str = DEFAULT_LOCKFILE
    options: BootstrapOptions = Field(default_factory=BootstrapOptions)

    def with_overrides(self, overrides: Mapping[str, Any]) -> WorkspaceConfig:
        """Return a copy whose options incorporate ``overrides``.

        Args:
            overrides: Option values supplied by the caller; ``None`` entries
                leave the configured value untouched.

        Returns:
            WorkspaceConfig: Updated configuration.

        Raises:
            ConfigError: If the merged options fail validation.
        """

        merged = self.options.model_dump()
        merged.update({key: value for key, value in overrides.items() if value is not None})
        try:
            options = BootstrapOptions.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(f"Invalid bootstrap options: {exc}") from exc
        return self.model_copy(update={"options": options})


def load_workspace_config(root: Path) -> WorkspaceConfig:
    """Load ``.osdpm.toml`` from ``root`` falling back to defaults.

    Args:
        root: Workspace root directory.

    Returns:
        WorkspaceConfig: Parsed configuration, or defaults when no file exists.

    Raises:
        ConfigError: If the file cannot be parsed or contains invalid values.
    """

    path = root / CONFIG_FILENAME
    if not path.is_file():
        return WorkspaceConfig()
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    try:
        return WorkspaceConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc


__all__ = [
    "BootstrapOptions",
    "CONFIG_FILENAME",
    "DEFAULT_CONCURRENCY",
    "DEFAULT_IGNORE_PATTERNS",
    "DEFAULT_LOCKFILE",
    "DEFAULT_PROJECT_GLOBS",
    "WorkspaceConfig",
    "load_workspace_config",
]
