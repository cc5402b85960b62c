from __future__ import annotations

import logging
import os
import time
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

R = TypeVar("R")

log = logging.getLogger(__name__)


@dataclass
class ThreadStats:
    start_ts: float
    tasks_submitted: int = 0
    tasks_completed: int = 0
    tasks_failed: int = 0
    tasks_cancelled: int = 0


class ThreadManager(Generic[R]):
    """
    A reusable, bounded thread-pool manager focused on I/O-bound workloads.

    Features
    --------
    - submit(fn, *args, **kwargs) -> Future   (blocks when max_queue is reached)
    - try_submit(fn, *args, **kwargs) -> Future | None   (never blocks)
    - Bounded outstanding tasks via a semaphore (max_queue)
    - Stats snapshot
    - Clean shutdown, context manager support

    Notes
    -----
    - For CPU-bound work, prefer multiprocessing. This is tuned for I/O-bound tasks (ffprobe).
    - Slots are released from a done-callback, so a future cancelled before it
      ever ran still gives its slot back.
    """

    def __init__(
        self,
        name: str = "worker",
        max_workers: Optional[int] = None,
        max_queue: Optional[int] = None,
        thread_name_prefix: Optional[str] = None,
        log_exceptions: bool = True,
    ) -> None:
        """
        Parameters
        ----------
        name:
            Logical name for stats/logging.
        max_workers:
            Max threads in the pool. Default: auto for I/O (~min(8, max(4, 2*CPUs))).
        max_queue:
            Max number of *outstanding* tasks (submitted but not finished).
            If None or <= 0, it's effectively unbounded (not recommended for very large workloads).
        thread_name_prefix:
            Prefix for thread names.
        log_exceptions:
            If True, exceptions in tasks are logged when futures complete.
        """
        if max_workers is None:
            n = os.cpu_count() or 4
            max_workers = max(4, min(8, n * 2))  # I/O-friendly default

        self._name = name
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=thread_name_prefix or f"{name}",
        )
        self._stats = ThreadStats(start_ts=time.time())
        self._log_exceptions = log_exceptions

        # Bounded outstanding-tasks controller
        if not max_queue or max_queue <= 0:
            self._slots = None  # unbounded
        else:
            # slots = how many tasks can be outstanding at once
            self._slots = threading.BoundedSemaphore(max_queue)

        self._closed = False
        self._lock = threading.Lock()

    # -------------------------
    # Lifecycle
    # -------------------------
    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        """Shut down the executor. Safe to call multiple times."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=wait, cancel_futures=cancel_futures)

    def __enter__(self) -> "ThreadManager[R]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True, cancel_futures=True)

    def stats(self) -> ThreadStats:
        """Return a *snapshot* of current stats."""
        with self._lock:
            return ThreadStats(
                start_ts=self._stats.start_ts,
                tasks_submitted=self._stats.tasks_submitted,
                tasks_completed=self._stats.tasks_completed,
                tasks_failed=self._stats.tasks_failed,
                tasks_cancelled=self._stats.tasks_cancelled,
            )

    # -------------------------
    # Submission
    # -------------------------
    def submit(self, fn: Callable[..., R], /, *args, **kwargs) -> Future[R]:
        """
        Submit a single callable. Applies queue bounding and exception logging.
        Returns a Future that will hold the result or exception.
        """
        if self._closed:
            raise RuntimeError(f"{self._name}: submit() after shutdown")

        # Apply backpressure if bounded
        if self._slots is not None:
            self._slots.acquire()
        return self._submit_holding_slot(fn, *args, **kwargs)

    def try_submit(self, fn: Callable[..., R], /, *args, **kwargs) -> Optional[Future[R]]:
        """
        Like submit(), but returns None instead of blocking when no slot is free.
        Callers typically run `fn` themselves in that case.
        """
        if self._closed:
            raise RuntimeError(f"{self._name}: try_submit() after shutdown")

        if self._slots is not None and not self._slots.acquire(blocking=False):
            return None
        return self._submit_holding_slot(fn, *args, **kwargs)

    def _submit_holding_slot(self, fn: Callable[..., R], /, *args, **kwargs) -> Future[R]:
        try:
            fut: Future[R] = self._executor.submit(fn, *args, **kwargs)
        except BaseException:
            if self._slots is not None:
                self._slots.release()
            raise

        with self._lock:
            self._stats.tasks_submitted += 1

        def _cb(f: Future[R]) -> None:
            # release slot when the callable *finishes*, success, error or cancel
            if self._slots is not None:
                self._slots.release()
            if f.cancelled():
                with self._lock:
                    self._stats.tasks_cancelled += 1
                return
            e = f.exception()
            with self._lock:
                if e is None:
                    self._stats.tasks_completed += 1
                else:
                    self._stats.tasks_failed += 1
            if e is not None and self._log_exceptions:
                log.error("%s task failed: %s", self._name, e, exc_info=e)

        fut.add_done_callback(_cb)
        return fut
