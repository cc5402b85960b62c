# vidsum/common/strings/durations.py
from __future__ import annotations

from typing import Tuple


def split_hms(total_seconds: float) -> Tuple[int, int, int]:
    """Split seconds into (hours, minutes, seconds); the fraction is truncated."""
    whole = int(max(0.0, total_seconds))
    return whole // 3600, (whole % 3600) // 60, whole % 60


def format_hms(total_seconds: float) -> str:
    """181.5 -> '0 hours, 3 minutes, 1 seconds'"""
    h, m, s = split_hms(total_seconds)
    return f"{h} hours, {m} minutes, {s} seconds"
