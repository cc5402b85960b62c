# vidsum/domain/dataclasses/reports.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from vidsum.domain.entities.probe import ProbeResult
from vidsum.domain.enums.entry_kind import EntryKind


# ---------------------------------------------------------------------------
# Base report (shared fields + utilities)
# ---------------------------------------------------------------------------
@dataclass
class BaseReport:
    """Common report base:
    - timing: started_at / finished_at
    - error capture: error_details
    - helpers: start(), stop(), add_error()
    """
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    # Each tuple is (subject/path, message)
    error_details: List[Tuple[str, str]] = field(default_factory=list)

    def start(self) -> None:
        if self.started_at is None:
            self.started_at = datetime.now()

    def stop(self) -> None:
        self.finished_at = datetime.now()

    def add_error(self, subject: str, message: str) -> None:
        self.error_details.append((subject, message))

    @property
    def elapsed_sec(self) -> Optional[float]:
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()


# ---------------------------------------------------------------------------
# Duration tally report
# ---------------------------------------------------------------------------
@dataclass
class TallyReport(BaseReport):
    root: Optional[Path] = None
    total_seconds: float = 0.0
    files_probed: int = 0        # video files dispatched (ok + failed)
    probe_failures: int = 0
    directories_scanned: int = 0  # root and unreadable subdirectories included
    directory_errors: int = 0
    cancelled: bool = False

    tree: Optional[ProbeResult] = None

    def absorb(self, tree: ProbeResult) -> "TallyReport":
        """Fill counters and error details from a finished result tree."""
        self.tree = tree
        self.root = tree.path
        self.total_seconds = tree.duration_sec
        for r in tree.walk():
            if r.kind is EntryKind.directory:
                self.directories_scanned += 1
                if not r.ok:
                    self.directory_errors += 1
                    self.add_error(str(r.path), r.error)
            else:
                self.files_probed += 1
                if not r.ok:
                    self.probe_failures += 1
                    self.add_error(str(r.path), r.error)
        return self
