# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Batch-by-batch execution of per-project work.

Batches run strictly one after another. Units inside a batch run on a thread
pool bounded by the scheduling policy; queued units take the first free slot.
When a unit fails, units that already started are allowed to finish, units
that have not started yet in that batch are skipped, and no later batch starts.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Final, Generic, TypeVar

from .errors import BatchFailedError

ItemT = TypeVar("ItemT")

WorkCallable = Callable[[ItemT], None]


@dataclass(frozen=True, slots=True)
class SchedulingPolicy:
    """Describe how units inside one batch share worker slots.

    Attributes:
        name: Label used in debug output.
        concurrency: Maximum number of units running at once; ``None`` lets
            every unit of a batch run together.
    """

    name: str
    concurrency: int | None = None

    def __post_init__(self) -> None:
        if self.concurrency is not None and self.concurrency < 1:
            raise ValueError("concurrency must be a positive integer or None")

    def workers_for(self, size: int) -> int:
        """Return the worker count used for a batch holding ``size`` units."""

        if self.concurrency is None:
            return max(size, 1)
        return max(min(self.concurrency, size), 1)


INSTALL_POLICY: Final[SchedulingPolicy] = SchedulingPolicy(name="install", concurrency=1)


def build_policy(concurrency: int | None) -> SchedulingPolicy:
    """Return the policy used for the cross-project build phase."""

    return SchedulingPolicy(name="build", concurrency=concurrency)


class BatchScheduler(Generic[ItemT]):
    """Run work over ordered batches honouring a :class:`SchedulingPolicy`."""

    def __init__(
        self,
        policy: SchedulingPolicy,
        *,
        debug_logger: Callable[[str], None] | None = None,
        describe: Callable[[ItemT], str] = str,
    ) -> None:
        """Create a scheduler for ``policy``.

        Args:
            policy: Concurrency policy applied inside each batch.
            debug_logger: Optional callable receiving progress messages.
            describe: Callable naming an item in progress messages.
        """

        self._policy = policy
        self._debug_logger = debug_logger
        self._describe = describe

    def _debug(self, message: str) -> None:
        if self._debug_logger:
            self._debug_logger(message)

    def run(self, batches: Sequence[Sequence[ItemT]], work: WorkCallable[ItemT]) -> None:
        """Execute ``work`` for every item, batch after batch.

        Args:
            batches: Ordered batches of items.
            work: Callable invoked once per item.

        Raises:
            Exception: The failure of the single failed unit when exactly one
                unit of a batch failed.
            BatchFailedError: When several units of the same batch failed.
        """

        total = len(batches)
        for index, batch in enumerate(batches, start=1):
            if not batch:
                continue
            self._debug(f"{self._policy.name} batch {index}/{total}: {len(batch)} unit(s)")
            errors = self._run_batch(batch, work)
            if len(errors) == 1:
                raise errors[0]
            if errors:
                raise BatchFailedError(errors)

    def _run_batch(self, batch: Sequence[ItemT], work: WorkCallable[ItemT]) -> list[Exception]:
        """Run one batch to settlement and return the failures it produced."""

        halted = threading.Event()

        def guarded(item: ItemT) -> None:
            if halted.is_set():
                self._debug(f"{self._policy.name}: skipped {self._describe(item)} after a failure in its batch")
                return
            try:
                work(item)
            except Exception:
                halted.set()
                raise

        errors: list[Exception] = []
        with ThreadPoolExecutor(
            max_workers=self._policy.workers_for(len(batch)),
            thread_name_prefix=f"osdpm-{self._policy.name}",
        ) as executor:
            futures: list[Future[None]] = [executor.submit(guarded, item) for item in batch]
            for future in as_completed(futures):
                error = future.exception()
                if error is None:
                    continue
                if not isinstance(error, Exception):
                    raise error
                errors.append(error)
        return errors


def run_batches(
    batches: Sequence[Sequence[ItemT]],
    work: WorkCallable[ItemT],
    *,
    concurrency: int | None = None,
) -> None:
    """Run ``work`` over ``batches`` with an ad-hoc concurrency limit.

    Args:
        batches: Ordered batches of items.
        work: Callable invoked once per item.
        concurrency: Maximum concurrent units per batch, unbounded when ``None``.
    """

    BatchScheduler(SchedulingPolicy(name="batch", concurrency=concurrency)).run(batches, work)


__all__ = [
    "BatchScheduler",
    "INSTALL_POLICY",
    "SchedulingPolicy",
    "build_policy",
    "run_batches",
]
