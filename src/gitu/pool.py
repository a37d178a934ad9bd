"""Bounded worker pool for per-repository evaluation."""

from __future__ import annotations

import concurrent.futures
import os
import threading
from typing import Callable

from . import log

PARALLELISM_PER_CPU = 10


def default_parallelism() -> int:
    """Return the default worker limit (ten per logical CPU)."""
    return (os.cpu_count() or 1) * PARALLELISM_PER_CPU


class BoundedPool:
    """Thread pool that blocks submitters once ``limit`` units are in flight.

    ``submit`` returns only after a slot is free, so a producer walking a
    large tree never queues more work than the pool can run. ``wait`` returns
    once every admitted unit has finished. Exceptions raised by a unit are
    logged and do not affect other units. Finished units leave nothing
    behind, so memory does not grow with the number of units admitted.
    """

    def __init__(self, limit: int) -> None:
        if limit < 1:
            raise ValueError(f"parallelism must be at least 1 (got {limit})")
        self.limit = limit
        self._slots = threading.BoundedSemaphore(limit)
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=limit, thread_name_prefix="gitu"
        )
        self._idle = threading.Condition()
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        """Number of admitted units that have not finished yet."""
        with self._idle:
            return self._in_flight

    def submit(self, label: str, fn: Callable[..., object], *args: object) -> None:
        """Admit one unit of work, blocking while the pool is saturated."""
        self._slots.acquire()
        with self._idle:
            self._in_flight += 1
        try:
            self._executor.submit(self._run_unit, label, fn, *args)
        except BaseException:
            self._finish()
            raise

    def _run_unit(self, label: str, fn: Callable[..., object], *args: object) -> None:
        try:
            fn(*args)
        except Exception as exc:
            log.error(f"{label}: evaluation aborted: {exc}")
        finally:
            self._finish()

    def _finish(self) -> None:
        with self._idle:
            self._in_flight -= 1
            if not self._in_flight:
                self._idle.notify_all()
        self._slots.release()

    def wait(self) -> None:
        """Block until every admitted unit has completed."""
        with self._idle:
            self._idle.wait_for(lambda: not self._in_flight)

    def shutdown(self) -> None:
        self.wait()
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "BoundedPool":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
