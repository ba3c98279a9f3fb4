# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Install dependencies, crosslink projects, and run cached bootstrap steps.

The orchestrator moves through ``install -> checksum -> build -> done`` and
lands in ``failed`` from any phase. Installs run one project at a time since
they share the dependency store and lockfile. Bootstrap steps run in parallel
inside each dependency batch and are skipped when the project's fingerprint
matches the record written after its last successful run.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from operator import attrgetter
from pathlib import Path

from .cache_store import BootstrapCacheStore
from .config import BootstrapOptions
from .errors import (
    BatchFailedError,
    BootstrapError,
    BuildError,
    ChecksumError,
    ConfigError,
    InstallError,
    LockValidationError,
)
from .fingerprint import Fingerprint, FingerprintComputer
from .graph import Batch, ProjectGraph, topologically_batch_projects
from .invokers import ProjectInvoker, YarnInvoker
from .link import link_project_executables
from .lockfile import YarnLock, read_yarn_lock, validate_single_version
from .logging import BootstrapLogger
from .project import BOOTSTRAP_SCRIPT, Project
from .scheduler import INSTALL_POLICY, BatchScheduler, build_policy


class BootstrapState(str, Enum):
    """Enumerate orchestrator states."""

    INSTALL_PHASE = "install"
    CHECKSUM_PHASE = "checksum"
    BUILD_PHASE = "build"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CacheDecision:
    """Whether a project's bootstrap step can be skipped in this run."""

    project: str
    fingerprint: Fingerprint
    valid: bool


@dataclass(slots=True)
class BootstrapResult:
    """Outcome of :func:`bootstrap`.

    Attributes:
        state: Final orchestrator state, ``DONE`` or ``FAILED``.
        error: Phase-tagged failure when the run did not complete.
        built: Projects whose bootstrap step ran and completed.
        skipped: Projects whose bootstrap step was skipped as cached.
    """

    state: BootstrapState
    error: BootstrapError | None = None
    built: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state is BootstrapState.DONE and self.error is None


class BootstrapOrchestrator:
    """Drive one bootstrap run over a fixed set of projects."""

    def __init__(
        self,
        projects: Mapping[str, Project],
        graph: ProjectGraph,
        options: BootstrapOptions | None = None,
        *,
        invoker: ProjectInvoker | None = None,
        cache_store: BootstrapCacheStore | None = None,
        lockfile: Path | None = None,
        logger: BootstrapLogger | None = None,
    ) -> None:
        """Create an orchestrator.

        Args:
            projects: Projects keyed by name, in registry order.
            graph: Acyclic dependency edges keyed by project name.
            options: Bootstrap options; defaults apply when omitted.
            invoker: Package-manager adapter used for installs and builds.
            cache_store: Store holding per-project cache records.
            lockfile: Path to the shared lockfile; ``None`` means no lock
                information is available.
            logger: Logger receiving progress messages.
        """

        self._projects = dict(projects)
        self._graph = graph
        self._options = options or BootstrapOptions()
        self._invoker: ProjectInvoker = invoker or YarnInvoker()
        self._cache_store = cache_store or BootstrapCacheStore()
        self._lockfile = lockfile
        self._logger = logger or BootstrapLogger()
        self._state = BootstrapState.INSTALL_PHASE
        self._outcomes: dict[str, str] = {}

    @property
    def state(self) -> BootstrapState:
        return self._state

    @property
    def built(self) -> list[str]:
        return [name for name in self._projects if self._outcomes.get(name) == "built"]

    @property
    def skipped(self) -> list[str]:
        return [name for name in self._projects if self._outcomes.get(name) == "cached"]

    def run(self) -> None:
        """Execute every phase in order.

        Raises:
            CyclicDependencyError: Before any side effect when the graph has a cycle.
            InstallError: When installing a project's dependencies fails.
            LockValidationError: When lock information is unusable or violates
                the single-version rule.
            LinkError: When executables cannot be linked.
            BuildError: When one or more bootstrap steps fail.
        """

        try:
            install_batches = topologically_batch_projects(
                self._projects,
                self._graph,
                scope_to_installable_only=True,
            )
            build_batches = topologically_batch_projects(self._projects, self._graph)

            self._state = BootstrapState.INSTALL_PHASE
            self._install_phase(install_batches)

            self._state = BootstrapState.CHECKSUM_PHASE
            decisions = self._checksum_phase()

            self._state = BootstrapState.BUILD_PHASE
            self._build_phase(build_batches, decisions)
        except BaseException:
            self._state = BootstrapState.FAILED
            raise
        self._state = BootstrapState.DONE

    def _install_phase(self, batches: list[Batch]) -> None:
        extra_args = self._options.extra_args()

        def install(project: Project) -> None:
            if project.is_workspace_project:
                self._logger.verbose(f"Skipping workspace project: {project.name}")
                return
            if not project.has_dependencies():
                return
            try:
                self._invoker.install_dependencies(project, extra_args=extra_args)
            except (RuntimeError, OSError) as exc:
                raise InstallError(f"Installing dependencies failed: {exc}", project=project.name) from exc

        scheduler: BatchScheduler[Project] = BatchScheduler(
            INSTALL_POLICY,
            debug_logger=self._logger.debug,
            describe=attrgetter("name"),
        )
        scheduler.run(batches, install)

    def _read_lock(self) -> YarnLock:
        if self._lockfile is None:
            return {}
        try:
            return read_yarn_lock(self._lockfile)
        except ConfigError as exc:
            raise LockValidationError(str(exc)) from exc

    def _checksum_phase(self) -> dict[str, CacheDecision]:
        lock = self._read_lock()
        validate_single_version(lock, self._options.single_version)
        link_project_executables(self._projects, self._graph, debug_logger=self._logger.verbose)

        computer = FingerprintComputer(
            self._projects,
            self._graph,
            lock,
            ignore_patterns=(*self._options.ignore_patterns, self._cache_store.relative_record_path),
        )
        decisions: dict[str, CacheDecision] = {}
        for project in self._projects.values():
            if not project.needs_bootstrap():
                continue
            try:
                fingerprint = computer.compute(project)
                valid = self._cache_store.is_valid(project, fingerprint, self._options.cache)
            except OSError as exc:
                raise ChecksumError(f"Unable to fingerprint project: {exc}", project=project.name) from exc
            if valid:
                self._logger.debug(f"[{project.name}] cache up to date")
            decisions[project.name] = CacheDecision(project=project.name, fingerprint=fingerprint, valid=valid)

        cached = sum(1 for decision in decisions.values() if decision.valid)
        if cached > 0:
            self._logger.ok(f"{cached} bootstrap builds are cached")
        return decisions

    def _bootstrap_step(self, project: Project) -> Callable[[], None]:
        if project.has_build_targets():
            if project.has_script(BOOTSTRAP_SCRIPT):
                self._logger.debug(
                    f"[{project.name}] ignoring [{BOOTSTRAP_SCRIPT}] script since build targets are provided",
                )
            self._logger.info(f"[{project.name}] running [{BOOTSTRAP_SCRIPT}] build targets")
            source_maps = self._options.source_maps
            return lambda: self._invoker.build_for_targets(project, source_maps=source_maps)
        self._logger.info(f"[{project.name}] running [{BOOTSTRAP_SCRIPT}] script")
        return lambda: self._invoker.run_script(project, BOOTSTRAP_SCRIPT)

    def _build_phase(self, batches: list[Batch], decisions: Mapping[str, CacheDecision]) -> None:
        def build(project: Project) -> None:
            decision = decisions.get(project.name)
            if decision is None:
                return
            if decision.valid:
                self._outcomes[project.name] = "cached"
                return
            step = self._bootstrap_step(project)
            try:
                self._cache_store.invalidate(project)
                step()
                self._cache_store.commit(project, decision.fingerprint)
            except (RuntimeError, OSError) as exc:
                raise BuildError(f"Bootstrap step failed: {exc}", project=project.name) from exc
            self._outcomes[project.name] = "built"
            self._logger.ok(f"[{project.name}] bootstrap complete")

        scheduler: BatchScheduler[Project] = BatchScheduler(
            build_policy(self._options.concurrency),
            debug_logger=self._logger.debug,
            describe=attrgetter("name"),
        )
        try:
            scheduler.run(batches, build)
        except BatchFailedError as exc:
            raise BuildError.aggregate(exc.errors) from exc


def bootstrap(
    projects: Mapping[str, Project],
    graph: ProjectGraph,
    options: BootstrapOptions | None = None,
    *,
    invoker: ProjectInvoker | None = None,
    cache_store: BootstrapCacheStore | None = None,
    lockfile: Path | None = None,
    logger: BootstrapLogger | None = None,
) -> BootstrapResult:
    """Bootstrap ``projects`` and report the outcome instead of raising.

    Args:
        projects: Projects keyed by name, in registry order.
        graph: Dependency edges keyed by project name.
        options: Bootstrap options.
        invoker: Package-manager adapter.
        cache_store: Store holding per-project cache records.
        lockfile: Path to the shared lockfile.
        logger: Logger receiving progress messages.

    Returns:
        BootstrapResult: ``DONE`` with built/skipped projects, or ``FAILED``
        with the phase-tagged error.
    """

    orchestrator = BootstrapOrchestrator(
        projects,
        graph,
        options,
        invoker=invoker,
        cache_store=cache_store,
        lockfile=lockfile,
        logger=logger,
    )
    try:
        orchestrator.run()
    except BootstrapError as exc:
        return BootstrapResult(
            state=orchestrator.state,
            error=exc,
            built=orchestrator.built,
            skipped=orchestrator.skipped,
        )
    return BootstrapResult(state=orchestrator.state, built=orchestrator.built, skipped=orchestrator.skipped)


__all__ = [
    "BootstrapOrchestrator",
    "BootstrapResult",
    "BootstrapState",
    "CacheDecision",
    "bootstrap",
]
