# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-project persistence of the fingerprint recorded at the last successful bootstrap.

Records are partitioned by project: each project owns one file below its
``target`` directory, accessed through a single :class:`ProjectCacheFile`
handle. A record is deleted before a bootstrap step runs and written only
after it succeeds, so an interrupted step always reads back as stale.
"""

from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, ValidationError

from .fingerprint import Fingerprint
from .project import TARGET_DIRNAME, Project

CACHE_FILENAME: Final[str] = ".bootstrap-cache"


class CacheRecord(BaseModel):
    """Fingerprint recorded after a project's bootstrap step succeeded."""

    model_config = ConfigDict(frozen=True)

    fingerprint: Fingerprint
    recorded_at: datetime


class ProjectCacheFile:
    """Single-writer handle over one project's cache record."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> CacheRecord | None:
        """Return the stored record, or ``None`` when absent or unreadable."""

        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return None
        try:
            return CacheRecord.model_validate(payload)
        except ValidationError:
            return None

    def is_valid(self, fingerprint: Fingerprint, *, caching_enabled: bool = True) -> bool:
        """Return whether the stored record matches ``fingerprint``.

        Args:
            fingerprint: Freshly computed fingerprint for the project.
            caching_enabled: ``False`` forces the record to be treated as stale.

        Returns:
            bool: ``True`` only when caching is enabled, a record exists, and
            its fingerprint equals ``fingerprint``.
        """

        if not caching_enabled:
            return False
        record = self.read()
        return record is not None and record.fingerprint == fingerprint

    def delete(self) -> None:
        self._path.unlink(missing_ok=True)

    def write(self, fingerprint: Fingerprint) -> CacheRecord:
        """Atomically persist ``fingerprint`` as the project's valid record.

        Args:
            fingerprint: Fingerprint the completed bootstrap step was run against.

        Returns:
            CacheRecord: The record that was written.
        """

        record = CacheRecord(fingerprint=fingerprint, recorded_at=datetime.now(timezone.utc))
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self._path.parent,
            prefix=f"{self._path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            handle.write(record.model_dump_json())
            temp_path = Path(handle.name)
        try:
            os.replace(temp_path, self._path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
        return record


class BootstrapCacheStore:
    """Key-value store of cache records partitioned by project name."""

    def __init__(self, *, filename: str = CACHE_FILENAME) -> None:
        self._filename = filename
        self._handles: dict[str, ProjectCacheFile] = {}

    @property
    def relative_record_path(self) -> str:
        """Return the record location relative to a project root, in posix form."""

        return f"{TARGET_DIRNAME}/{self._filename}"

    def handle(self, project: Project) -> ProjectCacheFile:
        """Return the one handle owning ``project``'s record."""

        return self._handles.setdefault(
            project.name,
            ProjectCacheFile(project.target_location / self._filename),
        )

    def read(self, project: Project) -> CacheRecord | None:
        return self.handle(project).read()

    def is_valid(self, project: Project, fingerprint: Fingerprint, caching_enabled: bool) -> bool:
        return self.handle(project).is_valid(fingerprint, caching_enabled=caching_enabled)

    def invalidate(self, project: Project) -> None:
        """Delete ``project``'s record before its bootstrap step runs."""

        self.handle(project).delete()

    def commit(self, project: Project, fingerprint: Fingerprint) -> CacheRecord:
        """Record ``fingerprint`` after ``project``'s bootstrap step succeeded."""

        return self.handle(project).write(fingerprint)


__all__ = ["BootstrapCacheStore", "CACHE_FILENAME", "CacheRecord", "ProjectCacheFile"]
