# vidsum/services/tally/service.py
from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, Collection, Optional

from vidsum.common.concurrency.thread_manager import ThreadManager
from vidsum.common.logging import get_logger
from vidsum.common.settings import Settings, get_settings
from vidsum.domain.dataclasses.reports import TallyReport
from vidsum.domain.ports.probe import DurationProbePort
from vidsum.services.probe.ffprobe_adapter import FFprobeDurationAdapter
from vidsum.services.tally.traversal import DirectoryTraverser

logger = get_logger(__name__)


class TallyService:
    """
    Runs one duration tally: owns the worker pools and the cancel token,
    drives DirectoryTraverser, and turns the result tree into a TallyReport.
    """

    def __init__(
        self,
        *,
        cfg: Optional[Settings] = None,
        prober: Optional[Callable[[threading.Event], DurationProbePort]] = None,
        probe_workers: Optional[int] = None,
        scan_workers: Optional[int] = None,
        video_exts: Optional[Collection[str]] = None,
    ) -> None:
        self.cfg = cfg or get_settings()
        self.cancel_event = threading.Event()

        # prober is a factory taking the cancel token (e.g., lambda ev: FFprobeDurationAdapter(cancel_event=ev))
        factory = prober or (lambda ev: FFprobeDurationAdapter(cancel_event=ev))
        self.prober: DurationProbePort = factory(self.cancel_event)

        self.probe_workers = max(1, int(probe_workers or self.cfg.concurrency.probe_workers))
        self.scan_workers = max(1, int(scan_workers or self.cfg.concurrency.scan_workers))
        self.video_exts = list(video_exts) if video_exts else list(self.cfg.video_exts)

    def cancel(self) -> None:
        """Stop dispatching new work and kill running probes. Thread-safe."""
        self.cancel_event.set()

    def run(self, directory: Path | str) -> TallyReport:
        """
        Tally `directory`. Raises DirectoryReadError if the root cannot be read.
        A KeyboardInterrupt cancels the run before the pools are drained.
        """
        rpt = TallyReport(root=Path(directory))
        rpt.start()

        probe_pool: ThreadManager = ThreadManager(
            name="probe",
            max_workers=self.probe_workers,
            max_queue=self.cfg.concurrency.probe_queue_maxsize,
        )
        # one slot per worker: a handed-off subdirectory never waits for a thread
        scan_pool: ThreadManager = ThreadManager(
            name="scan",
            max_workers=self.scan_workers,
            max_queue=self.scan_workers,
        )
        with probe_pool, scan_pool:
            traverser = DirectoryTraverser(
                self.prober,
                probe_pool=probe_pool,
                scan_pool=scan_pool,
                video_exts=self.video_exts,
                cancel_event=self.cancel_event,
            )
            try:
                tree = traverser.scan(directory)
            except KeyboardInterrupt:
                logger.warning("interrupted; cancelling outstanding probes")
                self.cancel()
                raise

        rpt.absorb(tree)
        rpt.cancelled = self.cancel_event.is_set()
        rpt.stop()

        stats = probe_pool.stats()
        logger.debug(
            "probe pool: submitted=%d completed=%d failed=%d cancelled=%d",
            stats.tasks_submitted, stats.tasks_completed, stats.tasks_failed, stats.tasks_cancelled,
        )
        return rpt
