# vidsum/services/filesystem/listing.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Collection, List, Tuple

from vidsum.domain.entities.entry import Entry, classify_path
from vidsum.domain.errors import DirectoryReadError


def _read_error(d: Path, e: OSError) -> DirectoryReadError:
    if isinstance(e, NotADirectoryError):
        return DirectoryReadError(d, "not a directory")
    if isinstance(e, FileNotFoundError):
        return DirectoryReadError(d, "no such directory")
    return DirectoryReadError(d, e.strerror or str(e))


def directory_identity(directory: Path | str) -> Tuple[int, int]:
    """
    (st_dev, st_ino) of the directory a path resolves to, following symlinks.
    Two paths with the same identity list the same entries.
    """
    d = Path(directory)
    try:
        st = os.stat(d)
    except OSError as e:
        raise _read_error(d, e) from e
    return st.st_dev, st.st_ino


def list_entries(directory: Path | str, video_exts: Collection[str]) -> List[Entry]:
    """
    Immediate entries of `directory`, classified and in path order.
    Raises DirectoryReadError if the directory cannot be listed.
    """
    d = Path(directory)
    out: List[Entry] = []
    try:
        with os.scandir(d) as it:
            for de in it:
                try:
                    # follows symlinks, like Path.is_dir()
                    is_dir = de.is_dir()
                except OSError:
                    is_dir = False
                p = d / de.name
                out.append(Entry(path=p, kind=classify_path(p, video_exts, is_dir=is_dir)))
    except OSError as e:
        raise _read_error(d, e) from e
    out.sort(key=lambda e: str(e.path))
    return out
