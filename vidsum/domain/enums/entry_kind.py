from __future__ import annotations
from enum import StrEnum

class EntryKind(StrEnum):
    directory = "directory"
    video_file = "video_file"
    ignored = "ignored"
