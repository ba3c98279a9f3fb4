# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Phase-tagged error taxonomy raised while bootstrapping a workspace."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum


class BootstrapPhase(str, Enum):
    """Enumerate the orchestration phases an error can be attributed to."""

    PREFLIGHT = "preflight"
    INSTALL = "install"
    CHECKSUM = "checksum"
    BUILD = "build"


class ConfigError(Exception):
    """Raised when workspace configuration or manifests are invalid."""


class BootstrapError(RuntimeError):
    """Base class for failures surfaced by the bootstrap orchestrator."""

    default_phase: BootstrapPhase | None = None

    def __init__(
        self,
        message: str,
        *,
        project: str | None = None,
        phase: BootstrapPhase | None = None,
    ) -> None:
        """Initialise the error with a message and optional context.

        Args:
            message: Human-readable description of the failure.
            project: Name of the project the failure belongs to, when known.
            phase: Phase in which the failure occurred. Defaults to the
                subclass' :attr:`default_phase`.
        """

        self.message = message
        self.project = project
        self.phase = phase if phase is not None else self.default_phase
        super().__init__(self._render())

    def _render(self) -> str:
        parts: list[str] = []
        if self.phase is not None:
            parts.append(f"[{self.phase.value}]")
        if self.project:
            parts.append(f"[{self.project}]")
        parts.append(self.message)
        return " ".join(parts)


class CyclicDependencyError(BootstrapError):
    """Raised when the project graph contains a dependency cycle."""

    default_phase = BootstrapPhase.PREFLIGHT

    def __init__(self, cycle: Sequence[str]) -> None:
        """Record ``cycle`` as the offending chain of project names.

        Args:
            cycle: Project names forming the cycle, first name repeated last.
        """

        self.cycle = tuple(cycle)
        super().__init__(f"Dependency cycle detected: {' -> '.join(self.cycle)}")


class InstallError(BootstrapError):
    """Raised when installing a project's external dependencies fails."""

    default_phase = BootstrapPhase.INSTALL


class LockValidationError(BootstrapError):
    """Raised when lock information violates the single-version rule."""

    default_phase = BootstrapPhase.CHECKSUM


class LinkError(BootstrapError):
    """Raised when cross-project executables cannot be linked."""

    default_phase = BootstrapPhase.CHECKSUM


class ChecksumError(BootstrapError):
    """Raised when a project's inputs or cache record cannot be read."""

    default_phase = BootstrapPhase.CHECKSUM


class BuildError(BootstrapError):
    """Raised when one or more project bootstrap steps fail."""

    default_phase = BootstrapPhase.BUILD

    def __init__(
        self,
        message: str,
        *,
        project: str | None = None,
        failures: Sequence[BuildError] = (),
    ) -> None:
        """Initialise a build failure.

        Args:
            message: Description of the failure.
            project: Project whose bootstrap step failed.
            failures: Individual failures when several units of one batch
                failed together.
        """

        self.failures: tuple[BuildError, ...] = tuple(failures)
        super().__init__(message, project=project)

    @classmethod
    def aggregate(cls, errors: Sequence[BaseException]) -> BuildError:
        """Return a single error summarising several per-project failures.

        Args:
            errors: Failures collected from one settled batch.

        Returns:
            BuildError: Error tagged with the first failed project that keeps
            every individual failure in :attr:`failures`.
        """

        failures = [
            error if isinstance(error, BuildError) else BuildError(str(error))
            for error in errors
        ]
        names = ", ".join(failure.project or "<unknown>" for failure in failures)
        first = failures[0].project if failures else None
        return cls(f"{len(failures)} bootstrap steps failed: {names}", project=first, failures=failures)


class BatchFailedError(Exception):
    """Raised by the scheduler when several units of one batch fail."""

    def __init__(self, errors: Sequence[BaseException]) -> None:
        """Collect ``errors`` in the order their units settled.

        Args:
            errors: Exceptions raised by the failed units.
        """

        self.errors = tuple(errors)
        super().__init__(f"{len(self.errors)} units failed in the same batch")


__all__ = [
    "BatchFailedError",
    "BootstrapError",
    "BootstrapPhase",
    "BuildError",
    "ChecksumError",
    "ConfigError",
    "CyclicDependencyError",
    "InstallError",
    "LinkError",
    "LockValidationError",
]
