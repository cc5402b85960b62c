# vidsum/domain/errors.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from vidsum.domain.enums.probe_error_kind import ProbeErrorKind


class VidsumError(Exception):
    """Base class for all domain errors."""


class DirectoryReadError(VidsumError):
    """A directory could not be listed (missing, not a directory, permission denied)."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot read directory {self.path}: {reason}")


class ProbeError(VidsumError):
    """
    Failure to obtain a duration for a single file.
    `kind` tells the caller what went wrong; callers normally map it to 0.0.
    """

    def __init__(
        self,
        kind: ProbeErrorKind,
        path: Path | str,
        message: str,
        *,
        output: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.path = Path(path)
        self.message = message
        self.output = output
        super().__init__(f"{kind.value}: {message}")
