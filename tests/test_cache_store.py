# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for per-project bootstrap cache records."""

from __future__ import annotations

from pathlib import Path

from osdpm.cache_store import CACHE_FILENAME, BootstrapCacheStore
from osdpm.project import Project


def _project(tmp_path: Path, name: str = "core") -> Project:
    root = tmp_path / name
    root.mkdir()
    return Project(name=name, path=root)


def test_commit_then_read_returns_record(tmp_path: Path) -> None:
    store = BootstrapCacheStore()
    project = _project(tmp_path)

    written = store.commit(project, "abc123")
    loaded = store.read(project)

    assert loaded is not None
    assert loaded.fingerprint == "abc123"
    assert loaded.recorded_at == written.recorded_at
    assert (project.path / "target" / CACHE_FILENAME).is_file()


def test_missing_record_is_not_valid(tmp_path: Path) -> None:
    store = BootstrapCacheStore()
    project = _project(tmp_path)

    assert store.read(project) is None
    assert not store.is_valid(project, "abc123", True)


def test_validity_requires_matching_fingerprint_and_enabled_cache(tmp_path: Path) -> None:
    store = BootstrapCacheStore()
    project = _project(tmp_path)
    store.commit(project, "abc123")

    assert store.is_valid(project, "abc123", True)
    assert not store.is_valid(project, "def456", True)
    assert not store.is_valid(project, "abc123", False)


def test_invalidate_removes_record(tmp_path: Path) -> None:
    store = BootstrapCacheStore()
    project = _project(tmp_path)
    store.commit(project, "abc123")

    store.invalidate(project)
    store.invalidate(project)

    assert store.read(project) is None


def test_corrupt_record_reads_as_absent(tmp_path: Path) -> None:
    store = BootstrapCacheStore()
    project = _project(tmp_path)
    record = store.handle(project).path
    record.parent.mkdir(parents=True)
    record.write_text("{not json", encoding="utf-8")

    assert store.read(project) is None
    record.write_text('{"fingerprint": "abc"}', encoding="utf-8")
    assert store.read(project) is None


def test_records_are_partitioned_by_project(tmp_path: Path) -> None:
    store = BootstrapCacheStore()
    core = _project(tmp_path, "core")
    plugin = _project(tmp_path, "plugin")

    store.commit(core, "core-fp")
    store.commit(plugin, "plugin-fp")
    store.invalidate(core)

    assert store.read(core) is None
    assert store.is_valid(plugin, "plugin-fp", True)
    assert store.handle(plugin) is store.handle(plugin)


def test_commit_leaves_no_temporary_files(tmp_path: Path) -> None:
    store = BootstrapCacheStore()
    project = _project(tmp_path)

    store.commit(project, "one")
    store.commit(project, "two")

    assert [path.name for path in (project.path / "target").iterdir()] == [CACHE_FILENAME]
    assert store.is_valid(project, "two", True)


def test_relative_record_path_points_into_target() -> None:
    assert BootstrapCacheStore().relative_record_path == f"target/{CACHE_FILENAME}"
