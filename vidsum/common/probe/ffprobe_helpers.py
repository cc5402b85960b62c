# vidsum/common/probe/ffprobe_helpers.py
from __future__ import annotations
from pathlib import Path
from typing import List, Optional
import math

def build_ffprobe_duration_cmd(
    input_path: str | Path,
    *,
    ffprobe_bin: str = "ffprobe",
    log_level: str = "error",
) -> List[str]:
    """
    Build an ffprobe command that prints only the container duration,
    as a bare number (no key names, no [FORMAT] wrapper).
    """
    if isinstance(input_path, Path):
        input_path = str(input_path)
    return [
        ffprobe_bin,
        "-v", log_level,
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        input_path,
    ]

def parse_duration_output(stdout: Optional[str]) -> Optional[float]:
    """
    Parse ffprobe's duration output (e.g. "125.346000\\n").
    Returns None for empty, non-numeric ("N/A"), negative or non-finite values.
    """
    s = (stdout or "").strip()
    if not s:
        return None
    try:
        val = float(s)
    except ValueError:
        return None
    if not math.isfinite(val) or val < 0:
        return None
    return val
