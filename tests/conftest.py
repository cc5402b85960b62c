# tests/conftest.py
from __future__ import annotations
import threading
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from vidsum.common import settings as settings_mod
from vidsum.domain.enums.probe_error_kind import ProbeErrorKind
from vidsum.domain.errors import ProbeError


class FakeProber:
    """
    Stand-in for ffprobe: the "duration" of a file is its text content.
    Non-numeric content raises ProbeError(parse_failure), like garbage ffprobe output.
    Tracks how many probes run at the same time.
    """

    def __init__(self, delay: float = 0.0, cancel_event: Optional[threading.Event] = None):
        self.delay = delay
        self.cancel_event = cancel_event
        self.calls: List[Path] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def probe(self, path: Path) -> float:
        with self._lock:
            self.calls.append(Path(path))
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            text = Path(path).read_text().strip()
            try:
                return float(text)
            except ValueError:
                raise ProbeError(ProbeErrorKind.parse_failure, path, f"could not parse {text!r}")
        finally:
            with self._lock:
                self.active -= 1


def _build(root: Path, layout: Dict[str, Any]) -> None:
    for name, val in layout.items():
        p = root / name
        if isinstance(val, dict):
            p.mkdir(parents=True, exist_ok=True)
            _build(p, val)
        else:
            p.write_text(str(val))


@pytest.fixture()
def make_tree(tmp_path):
    """
    make_tree({"a.mp4": 61.5, "sub": {"b.mkv": 120.0}, "notes.txt": "x"}) -> root Path
    Dicts become directories, anything else becomes file content.
    """
    def _make(layout: Dict[str, Any], name: str = "videos") -> Path:
        root = tmp_path / name
        root.mkdir()
        _build(root, layout)
        return root
    return _make


@pytest.fixture()
def fake_prober():
    return FakeProber()


@pytest.fixture()
def prober_cls():
    return FakeProber


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    # keep a developer's FFPROBE_BIN from leaking into tests
    monkeypatch.delenv("FFPROBE_BIN", raising=False)
    settings_mod.get_settings.cache_clear()
    yield
    settings_mod.get_settings.cache_clear()
