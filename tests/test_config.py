# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for workspace configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from osdpm.config import (
    CONFIG_FILENAME,
    DEFAULT_IGNORE_PATTERNS,
    BootstrapOptions,
    WorkspaceConfig,
    load_workspace_config,
)
from osdpm.errors import ConfigError


def test_defaults_without_config_file(tmp_path: Path) -> None:
    config = load_workspace_config(tmp_path)

    assert config.projects == (".", "packages/*", "plugins/*")
    assert config.lockfile == "yarn.lock"
    assert config.options.cache is True
    assert config.options.concurrency == 4
    assert config.options.source_maps is True
    assert config.options.ignore_patterns == DEFAULT_IGNORE_PATTERNS
    assert config.options.extra_args() == ()


def test_config_file_is_loaded(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(
        'projects = ["packages/*"]\n'
        'lockfile = "deps.lock"\n'
        "\n"
        "[options]\n"
        "cache = false\n"
        "concurrency = 2\n"
        'single_version = " Lodash "\n'
        "frozen_lockfile = true\n",
        encoding="utf-8",
    )

    config = load_workspace_config(tmp_path)

    assert config.projects == ("packages/*",)
    assert config.lockfile == "deps.lock"
    assert config.options.cache is False
    assert config.options.concurrency == 2
    assert config.options.single_version == "lodash"
    assert config.options.extra_args() == ("--frozen-lockfile",)


@pytest.mark.parametrize(
    "content",
    [
        "[options\n",
        "[options]\nconcurrency = 0\n",
        "[options]\nunknown = true\n",
        "unexpected = 1\n",
    ],
)
def test_invalid_config_raises_config_error(tmp_path: Path, content: str) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_workspace_config(tmp_path)


def test_overrides_replace_only_supplied_values() -> None:
    config = WorkspaceConfig(options=BootstrapOptions(concurrency=2, prefer_offline=True))

    updated = config.with_overrides({"cache": False, "concurrency": None, "single_version": "React"})

    assert updated.options.cache is False
    assert updated.options.concurrency == 2
    assert updated.options.prefer_offline is True
    assert updated.options.single_version == "react"
    assert config.options.cache is True


def test_invalid_override_raises_config_error() -> None:
    with pytest.raises(ConfigError, match="Invalid bootstrap options"):
        WorkspaceConfig().with_overrides({"concurrency": 0})


def test_blank_single_version_is_treated_as_unset() -> None:
    assert BootstrapOptions(single_version="   ").single_version is None


def test_options_are_immutable() -> None:
    options = BootstrapOptions()

    with pytest.raises(ValidationError):
        options.cache = False  # type: ignore[misc]


def test_unbounded_concurrency_is_allowed() -> None:
    assert BootstrapOptions(concurrency=None).concurrency is None
