# vidsum/services/tally/traversal.py
from __future__ import annotations

import threading
from pathlib import Path
from typing import Collection, Optional, Set, Tuple

from vidsum.common.concurrency.thread_manager import ThreadManager
from vidsum.common.logging import get_logger
from vidsum.domain.entities.entry import Entry
from vidsum.domain.entities.probe import ProbeResult
from vidsum.domain.enums.entry_kind import EntryKind
from vidsum.domain.errors import DirectoryReadError, ProbeError
from vidsum.domain.ports.probe import DurationProbePort
from vidsum.services.filesystem.listing import directory_identity, list_entries
from vidsum.services.tally.aggregator import FanIn

logger = get_logger(__name__)

ALREADY_COUNTED = "already counted through another path (symlink cycle or duplicate link)"


class _VisitedDirs:
    """Directories (by st_dev, st_ino) already claimed during one scan; shared by all its threads."""

    def __init__(self) -> None:
        self._seen: Set[Tuple[int, int]] = set()
        self._lock = threading.Lock()

    def claim(self, identity: Tuple[int, int]) -> bool:
        with self._lock:
            if identity in self._seen:
                return False
            self._seen.add(identity)
            return True


class DirectoryTraverser:
    """
    Recursive fan-out / fan-in over a directory tree.

    Per directory level:
      - video files are probed on `probe_pool` (its worker count caps the
        number of ffprobe processes in flight),
      - subdirectories recurse on `scan_pool` when it has a free slot, or on
        the calling thread otherwise,
      - ignored entries dispatch nothing,
      - every dispatched task reports exactly one ProbeResult into the
        level's FanIn; the level blocks for all of them and sums them.

    Each physical directory is counted once per scan, so symlink loops and
    duplicate links cannot inflate the total.

    Probe failures, unreadable subdirectories and directories reached a
    second time count as 0.0 and are kept on the result as `error`. Only an
    unreadable root raises DirectoryReadError.
    """

    def __init__(
        self,
        prober: DurationProbePort,
        *,
        probe_pool: ThreadManager,
        scan_pool: ThreadManager,
        video_exts: Collection[str],
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.prober = prober
        self.probe_pool = probe_pool
        self.scan_pool = scan_pool
        self.video_exts = frozenset(video_exts)
        self.cancel_event = cancel_event or threading.Event()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    # ---------------- public ----------------

    def traverse(self, directory: Path | str) -> float:
        """Total duration in seconds of every recognized video under `directory`."""
        return self.scan(directory).duration_sec

    def scan(self, directory: Path | str) -> ProbeResult:
        """
        Like traverse(), but returns the full result tree.
        Raises DirectoryReadError if `directory` itself cannot be listed.
        """
        return self._scan(Path(directory), _VisitedDirs())

    # ---------------- per level ----------------

    def _scan(self, directory: Path, visited: "_VisitedDirs") -> ProbeResult:
        if not visited.claim(directory_identity(directory)):
            logger.warning("skipping %s: directory already counted", directory)
            return ProbeResult.failed(directory, ALREADY_COUNTED, kind=EntryKind.directory)
        entries = list_entries(directory, self.video_exts)

        fan_in = FanIn(directory)
        for entry in entries:
            if self.cancelled:
                logger.debug("cancelled; stop dispatching in %s", directory)
                break
            if not entry.dispatchable:
                continue
            if entry.kind is EntryKind.directory:
                self._dispatch_directory(entry, fan_in, visited)
            else:
                self._dispatch_probe(entry, fan_in)

        logger.debug("%s: dispatched %d of %d entries", directory, fan_in.expected, len(entries))
        return fan_in.total()

    # ---------------- dispatch ----------------

    def _dispatch_probe(self, entry: Entry, fan_in: FanIn) -> None:
        fut = self.probe_pool.submit(self._probe_one, entry.path)
        fan_in.deliver_from(fut, entry.path, self._failed_probe)

    def _dispatch_directory(self, entry: Entry, fan_in: FanIn, visited: "_VisitedDirs") -> None:
        fut = self.scan_pool.try_submit(self._scan_subdirectory, entry.path, visited)
        if fut is None:
            # scan pool saturated: recurse on this thread
            fan_in.expect()
            fan_in.put(self._scan_subdirectory(entry.path, visited))
            return
        fan_in.deliver_from(fut, entry.path, self._failed_subdirectory)

    # ---------------- tasks ----------------

    def _probe_one(self, path: Path) -> ProbeResult:
        if self.cancelled:
            return ProbeResult.failed(path, "cancelled")
        try:
            duration = self.prober.probe(path)
        except ProbeError as e:
            logger.warning("probe failed for %s: %s", path, e)
            return ProbeResult.failed(path, str(e))
        return ProbeResult(path=path, duration_sec=duration)

    def _scan_subdirectory(self, path: Path, visited: "_VisitedDirs") -> ProbeResult:
        try:
            return self._scan(path, visited)
        except DirectoryReadError as e:
            logger.warning("skipping subtree: %s", e)
            return ProbeResult.failed(path, str(e), kind=EntryKind.directory)

    # ---------------- fallbacks for raised / cancelled futures ----------------

    @staticmethod
    def _failed_probe(path: Path, exc: BaseException | None) -> ProbeResult:
        return ProbeResult.failed(path, "cancelled" if exc is None else f"unexpected error: {exc}")

    @staticmethod
    def _failed_subdirectory(path: Path, exc: BaseException | None) -> ProbeResult:
        msg = "cancelled" if exc is None else f"unexpected error: {exc}"
        return ProbeResult.failed(path, msg, kind=EntryKind.directory)
