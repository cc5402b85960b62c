# vidsum/services/probe/ffprobe_adapter.py
from __future__ import annotations

import shlex
import shutil
import subprocess
import threading
import time
from pathlib import Path
from typing import Optional

from vidsum.common.logging import get_logger
from vidsum.common.probe.ffprobe_helpers import build_ffprobe_duration_cmd, parse_duration_output
from vidsum.common.settings import get_settings
from vidsum.domain.enums.probe_error_kind import ProbeErrorKind
from vidsum.domain.errors import ProbeError
from vidsum.domain.ports.probe import DurationProbePort

logger = get_logger(__name__)


class FFprobeDurationAdapter(DurationProbePort):
    """
    Infrastructure adapter implementing DurationProbePort using `ffprobe`.
    One subprocess per call, no retries. Safe for use from ThreadManager (I/O-bound).

    The optional `cancel_event` is polled while ffprobe runs; once set, the
    process is killed and ProbeError(cancelled) is raised.
    """

    def __init__(
        self,
        ffprobe_bin: Optional[str] = None,
        timeout_sec: Optional[float] = None,
        *,
        log_level: Optional[str] = None,
        poll_interval_sec: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        cfg = get_settings()
        candidate = ffprobe_bin or cfg.ffprobe_bin
        # Resolve to an absolute path for nicer logs; a missing binary is a
        # per-file launch failure, not a constructor error.
        self.ffprobe_bin = shutil.which(candidate) or candidate
        self.timeout_sec = float(timeout_sec or cfg.ffprobe.timeout_sec)
        self.log_level = log_level or cfg.ffprobe.log_level
        self.poll_interval_sec = float(poll_interval_sec or cfg.ffprobe.poll_interval_sec)
        self.cancel_event = cancel_event

    # ---- Port API -------------------------------------------------------------
    def probe(self, path: Path) -> float:
        path = Path(path)
        if self._cancelled():
            raise ProbeError(ProbeErrorKind.cancelled, path, "cancelled before launch")

        cmd = build_ffprobe_duration_cmd(path, ffprobe_bin=self.ffprobe_bin, log_level=self.log_level)
        logger.debug("ffprobe cmd: %s", " ".join(shlex.quote(p) for p in cmd))

        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise ProbeError(
                ProbeErrorKind.launch_failure, path, f"failed to execute {self.ffprobe_bin}: {e}"
            ) from e

        with proc:
            stdout = self._wait(proc, path)

        if proc.returncode != 0:
            logger.debug("ffprobe exited with %s for %s", proc.returncode, path)

        duration = parse_duration_output(stdout)
        if duration is None:
            shown = (stdout or "").strip()[:80]
            raise ProbeError(
                ProbeErrorKind.parse_failure,
                path,
                f"could not parse ffprobe output {shown!r}",
                output=stdout,
            )
        return duration

    # ---- helpers --------------------------------------------------------------
    def _cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def _wait(self, proc: subprocess.Popen, path: Path) -> str:
        """Collect stdout; kill the process on timeout or cancellation."""
        deadline = time.monotonic() + self.timeout_sec
        while True:
            remaining = deadline - time.monotonic()
            try:
                stdout, _ = proc.communicate(timeout=max(0.0, min(self.poll_interval_sec, remaining)))
                return stdout or ""
            except subprocess.TimeoutExpired:
                pass

            if self._cancelled():
                self._kill(proc)
                raise ProbeError(ProbeErrorKind.cancelled, path, "cancelled while running")
            if time.monotonic() >= deadline:
                self._kill(proc)
                raise ProbeError(
                    ProbeErrorKind.timeout, path, f"ffprobe timed out after {self.timeout_sec:g}s"
                )

    @staticmethod
    def _kill(proc: subprocess.Popen) -> None:
        proc.kill()
        proc.communicate()
