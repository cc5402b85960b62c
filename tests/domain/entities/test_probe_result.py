from pathlib import Path

import pytest

from vidsum.domain.entities.probe import ProbeResult
from vidsum.domain.enums.entry_kind import EntryKind


def test_probe_result_defaults():
    pr = ProbeResult(path=Path("a.mp4"))
    assert pr.duration_sec == 0.0
    assert pr.kind is EntryKind.video_file
    assert pr.ok
    assert pr.children == ()


def test_probe_result_is_immutable():
    pr = ProbeResult(path=Path("a.mp4"), duration_sec=1.0)
    with pytest.raises(Exception):
        pr.duration_sec = 2.0  # type: ignore[misc]


def test_failed_result_contributes_zero():
    pr = ProbeResult.failed(Path("bad.mkv"), "parse_failure: 'N/A'")
    assert pr.duration_sec == 0.0
    assert not pr.ok


def test_for_directory_sums_and_keeps_given_order():
    root = Path("/v")
    kids = [
        ProbeResult(path=root / "b.mp4", duration_sec=2.0),
        ProbeResult(path=root / "a.mp4", duration_sec=1.5),
        ProbeResult.failed(root / "c.mov", "boom"),
    ]
    d = ProbeResult.for_directory(root, kids)
    assert d.kind is EntryKind.directory
    assert d.duration_sec == pytest.approx(3.5)
    assert [c.path.name for c in d.children] == ["b.mp4", "a.mp4", "c.mov"]


def test_walk_is_depth_first_in_path_order():
    root = Path("/v")
    sub = ProbeResult.for_directory(root / "s", [ProbeResult(path=root / "s" / "x.mp4", duration_sec=1.0)])
    top = ProbeResult.for_directory(root, [ProbeResult(path=root / "a.mp4", duration_sec=2.0), sub])
    assert [r.path for r in top.walk()] == [root, root / "a.mp4", root / "s", root / "s" / "x.mp4"]
    assert top.duration_sec == pytest.approx(3.0)
