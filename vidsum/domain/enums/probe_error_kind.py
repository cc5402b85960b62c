from __future__ import annotations
from enum import StrEnum

class ProbeErrorKind(StrEnum):
    launch_failure = "launch_failure"
    parse_failure = "parse_failure"
    timeout = "timeout"
    cancelled = "cancelled"
