# vidsum/domain/enums/file_format.py
from __future__ import annotations

from enum import StrEnum


class VideoFormats(StrEnum):
    MP4 = "mp4"
    AVI = "avi"
    MOV = "mov"
    MKV = "mkv"
