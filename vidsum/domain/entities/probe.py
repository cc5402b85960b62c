# vidsum/domain/entities/probe.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple

from vidsum.domain.enums.entry_kind import EntryKind


def path_key(result: "ProbeResult") -> str:
    """Sort key: lexicographic comparison of the full path string."""
    return str(result.path)


@dataclass(frozen=True)
class ProbeResult:
    """
    Duration reported for one dispatched unit of work.

    For a video file this is the probed duration (0.0 if the probe failed,
    with `error` set). For a directory it is the sum of `children`, which are
    kept in path order.
    """
    path: Path
    duration_sec: float = 0.0
    kind: EntryKind = EntryKind.video_file
    error: Optional[str] = None
    children: Tuple["ProbeResult", ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, path: Path, error: str, *, kind: EntryKind = EntryKind.video_file) -> "ProbeResult":
        return cls(path=path, duration_sec=0.0, kind=kind, error=error)

    @classmethod
    def for_directory(cls, path: Path, results: Iterable["ProbeResult"]) -> "ProbeResult":
        """Sum `results` into a directory result; children keep the order given (FanIn.collect() sorts)."""
        children = tuple(results)
        total = 0.0
        for r in children:
            total += r.duration_sec
        return cls(path=path, duration_sec=total, kind=EntryKind.directory, children=children)

    def walk(self) -> Iterator["ProbeResult"]:
        """Depth-first, path-ordered iteration over this result and all descendants."""
        yield self
        for child in self.children:
            yield from child.walk()
