"""Bounded thread pool for independent report work.

Reports share no mutable state, so separate requests (and the separate
asset fetches of one request) can run side by side.

Usage::

    pool = WorkerPool(max_workers=4)
    outcomes = pool.map_ordered(build, requests)
    pool.shutdown()
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, TypeVar

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_MAX_WORKERS = 4


class WorkerPool:
    """Fixed-size thread pool with lightweight metrics.

    Parameters
    ----------
    max_workers:
        Number of worker threads.
    thread_name_prefix:
        Prefix for worker-thread names (aids debugging / profiling).
    """

    def __init__(
        self,
        max_workers: int = DEFAULT_MAX_WORKERS,
        thread_name_prefix: str = "gemlab-worker",
    ) -> None:
        self._max_workers = max(1, int(max_workers))
        self._executor = ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix=thread_name_prefix,
        )
        self._total_tasks: int = 0
        self._total_wait_s: float = 0.0
        self._metrics_lock = threading.Lock()
        self._alive = True

    def __enter__(self) -> WorkerPool:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    # -- Public API -----------------------------------------------------------

    def submit(self, fn: Callable[..., R], *args: Any, **kwargs: Any) -> Future[R]:
        """Submit a single callable; returns a ``Future``."""
        if not self._alive:
            raise RuntimeError("WorkerPool is shut down")
        with self._metrics_lock:
            self._total_tasks += 1
        return self._executor.submit(fn, *args, **kwargs)

    def map_ordered(self, fn: Callable[[T], R], items: list[T]) -> list[R]:
        """Run *fn* on each item in parallel; results keep input order.

        The first exception (in input order) propagates after all tasks
        have finished.
        """
        t0 = time.monotonic()
        futures = [self.submit(fn, item) for item in items]
        errors: list[BaseException] = []
        results: list[R] = []
        for fut in futures:
            try:
                results.append(fut.result())
            except Exception as exc:
                errors.append(exc)
        self._record_wait(time.monotonic() - t0)
        if errors:
            raise errors[0]
        return results

    def shutdown(self, wait: bool = True) -> None:
        """Shut down the pool.  Safe to call multiple times."""
        self._alive = False
        self._executor.shutdown(wait=wait)

    def _record_wait(self, elapsed: float) -> None:
        with self._metrics_lock:
            self._total_wait_s += elapsed

    # -- Observability --------------------------------------------------------

    def stats(self) -> dict[str, Any]:
        return {
            "max_workers": self._max_workers,
            "total_tasks": self._total_tasks,
            "total_wait_s": round(self._total_wait_s, 4),
            "alive": self._alive,
        }
