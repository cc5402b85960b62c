# vidsum/cli/main.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from vidsum.common.logging import configure_logging, get_logger
from vidsum.common.settings import get_settings
from vidsum.common.strings.durations import format_hms
from vidsum.domain.errors import DirectoryReadError
from vidsum.services.probe.ffprobe_adapter import FFprobeDurationAdapter
from vidsum.services.tally.service import TallyService

logger = get_logger(__name__)


def _positive_int(v: str) -> int:
    try:
        n = int(v)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {v!r}")
    if n < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return n


def _positive_float(v: str) -> float:
    try:
        f = float(v)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {v!r}")
    if f <= 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return f


def build_parser() -> argparse.ArgumentParser:
    cfg = get_settings()
    parser = argparse.ArgumentParser(
        prog="vidsum",
        description="Sum the playback duration of every video file under a directory.",
    )
    parser.add_argument(
        "-n", "--num-threads", type=_positive_int, default=cfg.concurrency.probe_workers,
        help="max ffprobe processes running at once (default: %(default)s)",
    )
    parser.add_argument(
        "-d", "--directory", default=".",
        help="directory to scan recursively (default: current directory)",
    )
    parser.add_argument(
        "--timeout", type=_positive_float, default=cfg.ffprobe.timeout_sec,
        help="per-file ffprobe timeout in seconds (default: %(default)s)",
    )
    parser.add_argument(
        "--ffprobe", default=cfg.ffprobe_bin,
        help="ffprobe executable (default: %(default)s)",
    )
    parser.add_argument(
        "--ext", action="append", dest="exts", metavar="EXT",
        help="recognized extension, case-sensitive; repeatable (default: %s)" % ",".join(cfg.video_exts),
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = get_settings()
    configure_logging("DEBUG" if args.verbose else cfg.log_level)

    exts: Optional[List[str]] = [e.lstrip(".") for e in args.exts] if args.exts else None
    svc = TallyService(
        cfg=cfg,
        prober=lambda ev: FFprobeDurationAdapter(args.ffprobe, args.timeout, cancel_event=ev),
        probe_workers=args.num_threads,
        video_exts=exts,
    )

    try:
        rpt = svc.run(Path(args.directory))
    except DirectoryReadError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("interrupted", file=sys.stderr)
        return 130

    for subject, message in rpt.error_details:
        print(f"warning: {subject}: {message}", file=sys.stderr)

    print(f"Total duration: {format_hms(rpt.total_seconds)}")
    logger.debug(
        "%d files, %d directories, %d failures in %.2fs",
        rpt.files_probed, rpt.directories_scanned,
        rpt.probe_failures + rpt.directory_errors, rpt.elapsed_sec or 0.0,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
