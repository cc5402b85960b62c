# vidsum/domain/entities/entry.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Collection, Optional

from vidsum.domain.enums.entry_kind import EntryKind


@dataclass(frozen=True)
class Entry:
    """
    One filesystem object seen during a single directory listing.
    Only lives for that listing pass; never mutated.
    """
    path: Path
    kind: EntryKind

    @property
    def dispatchable(self) -> bool:
        return self.kind is not EntryKind.ignored


def classify_path(path: Path, video_exts: Collection[str], *, is_dir: Optional[bool] = None) -> EntryKind:
    """
    Directory if the filesystem says so, VideoFile if the suffix (case as found)
    is one of `video_exts`, Ignored otherwise.
    Pass `is_dir` when the caller already knows it (e.g. from os.DirEntry).
    """
    if is_dir is None:
        is_dir = path.is_dir()
    if is_dir:
        return EntryKind.directory
    ext = path.suffix[1:]
    if ext and ext in video_exts:
        return EntryKind.video_file
    return EntryKind.ignored
