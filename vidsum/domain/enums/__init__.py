from vidsum.domain.enums.entry_kind import EntryKind
from vidsum.domain.enums.file_format import VideoFormats
from vidsum.domain.enums.probe_error_kind import ProbeErrorKind
__all__ = [
    "EntryKind",
    "VideoFormats",
    "ProbeErrorKind",
]
