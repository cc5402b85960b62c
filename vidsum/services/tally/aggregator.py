# vidsum/services/tally/aggregator.py
from __future__ import annotations

import queue
from concurrent.futures import Future
from pathlib import Path
from typing import Callable, List

from vidsum.domain.entities.probe import ProbeResult, path_key


class FanIn:
    """
    Per-directory fan-in point: many producers, one consumer.

    The owning traversal call registers each dispatched task with
    `expect()`; every task delivers exactly one ProbeResult with `put()`.
    `collect()` blocks until as many results arrived as were expected,
    then returns them in path order.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self._channel: "queue.Queue[ProbeResult]" = queue.Queue()
        self._expected = 0
        self._collected = False

    @property
    def expected(self) -> int:
        return self._expected

    def expect(self, n: int = 1) -> None:
        if self._collected:
            raise RuntimeError(f"fan-in for {self.directory} already collected")
        self._expected += n

    def put(self, result: ProbeResult) -> None:
        self._channel.put(result)

    def deliver_from(self, fut: Future, path: Path, on_error: Callable[[Path, BaseException | None], ProbeResult]) -> None:
        """
        Register `fut` and route its outcome into the channel once it is done.
        A raised or cancelled future still delivers exactly one result,
        built by `on_error` (exception is None for a cancelled future).
        """
        self.expect()

        def _deliver(f: Future) -> None:
            if f.cancelled():
                self.put(on_error(path, None))
                return
            e = f.exception()
            self.put(on_error(path, e) if e is not None else f.result())

        fut.add_done_callback(_deliver)

    def collect(self) -> List[ProbeResult]:
        """Block until every expected result has arrived; path-ordered."""
        self._collected = True
        results = [self._channel.get() for _ in range(self._expected)]
        results.sort(key=path_key)
        return results

    def total(self) -> ProbeResult:
        """Collect and sum into this directory's own result."""
        return ProbeResult.for_directory(self.directory, self.collect())
