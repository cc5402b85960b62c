from __future__ import annotations
from pathlib import Path
from typing import Protocol

class DurationProbePort(Protocol):
    # Returns seconds; raises vidsum.domain.errors.ProbeError on failure.
    def probe(self, path: Path) -> float: ...
