import pytest

import vidsum.cli.main as cli


class _StubAdapter:
    """Reads the duration from the file content, like tests/conftest.FakeProber."""
    instances = []

    def __init__(self, ffprobe_bin=None, timeout_sec=None, *, cancel_event=None):
        self.ffprobe_bin = ffprobe_bin
        self.timeout_sec = timeout_sec
        self.cancel_event = cancel_event
        type(self).instances.append(self)

    def probe(self, path):
        from vidsum.domain.enums.probe_error_kind import ProbeErrorKind
        from vidsum.domain.errors import ProbeError

        text = path.read_text().strip()
        try:
            return float(text)
        except ValueError:
            raise ProbeError(ProbeErrorKind.parse_failure, path, f"could not parse {text!r}")


@pytest.fixture(autouse=True)
def _stub_ffprobe(monkeypatch):
    _StubAdapter.instances.clear()
    monkeypatch.setattr(cli, "FFprobeDurationAdapter", _StubAdapter)


def test_cli_prints_total(make_tree, capsys):
    root = make_tree({"a.mp4": 61.5, "sub": {"b.mkv": 120.0}})
    rc = cli.main(["-n", "2", "-d", str(root)])
    out, err = capsys.readouterr()
    assert rc == 0
    assert out.strip() == "Total duration: 0 hours, 3 minutes, 1 seconds"
    assert err == ""


def test_cli_empty_directory(make_tree, capsys):
    root = make_tree({})
    assert cli.main(["-d", str(root)]) == 0
    assert capsys.readouterr().out.strip() == "Total duration: 0 hours, 0 minutes, 0 seconds"


def test_cli_defaults_to_current_directory(make_tree, monkeypatch, capsys):
    root = make_tree({"a.mov": 3600.0})
    monkeypatch.chdir(root)
    assert cli.main([]) == 0
    assert capsys.readouterr().out.strip() == "Total duration: 1 hours, 0 minutes, 0 seconds"


def test_cli_reports_failed_files_and_continues(make_tree, capsys):
    root = make_tree({"a.mp4": 60.0, "broken.avi": "N/A"})
    rc = cli.main(["-d", str(root)])
    out, err = capsys.readouterr()
    assert rc == 0
    assert "1 minutes" in out
    assert any(line.startswith("warning:") and "broken.avi" in line for line in err.splitlines())


def test_cli_missing_directory_exits_1(tmp_path, capsys):
    rc = cli.main(["-d", str(tmp_path / "missing")])
    _, err = capsys.readouterr()
    assert rc == 1
    assert any(line.startswith("error:") and "missing" in line for line in err.splitlines())


def test_cli_passes_ffprobe_options(make_tree):
    root = make_tree({"a.mp4": 1.0})
    cli.main(["-d", str(root), "--ffprobe", "/opt/ffprobe", "--timeout", "2.5"])
    [adapter] = _StubAdapter.instances
    assert adapter.ffprobe_bin == "/opt/ffprobe"
    assert adapter.timeout_sec == 2.5
    assert adapter.cancel_event is not None


def test_cli_custom_extension(make_tree, capsys):
    root = make_tree({"a.webm": 120.0, "b.mp4": 60.0})
    assert cli.main(["-d", str(root), "--ext", ".webm"]) == 0
    assert "2 minutes" in capsys.readouterr().out


@pytest.mark.parametrize("bad", [["-n", "0"], ["-n", "x"], ["--timeout", "0"]])
def test_cli_rejects_bad_numbers(bad):
    with pytest.raises(SystemExit) as ei:
        cli.main(bad)
    assert ei.value.code == 2
