import pytest

from vidsum.domain.enums.entry_kind import EntryKind
from vidsum.domain.errors import DirectoryReadError
from vidsum.services.filesystem.listing import directory_identity, list_entries

EXTS = {"mp4", "avi", "mov", "mkv"}


def test_list_entries_classifies_and_sorts(make_tree):
    root = make_tree({"b.mkv": 1, "a.mp4": 1, "notes.txt": "x", "sub": {}})
    entries = list_entries(root, EXTS)
    assert [e.path.name for e in entries] == ["a.mp4", "b.mkv", "notes.txt", "sub"]
    assert [e.kind for e in entries] == [
        EntryKind.video_file,
        EntryKind.video_file,
        EntryKind.ignored,
        EntryKind.directory,
    ]


def test_list_entries_empty_dir(make_tree):
    assert list_entries(make_tree({}), EXTS) == []


def test_list_entries_missing_dir(tmp_path):
    with pytest.raises(DirectoryReadError) as ei:
        list_entries(tmp_path / "nope", EXTS)
    assert ei.value.path == tmp_path / "nope"


def test_list_entries_on_a_file(tmp_path):
    f = tmp_path / "a.mp4"
    f.write_text("1")
    with pytest.raises(DirectoryReadError, match="not a directory"):
        list_entries(f, EXTS)


def test_symlinked_directory_is_a_directory(tmp_path):
    real = tmp_path / "real"
    real.mkdir()
    root = tmp_path / "root"
    root.mkdir()
    (root / "link").symlink_to(real, target_is_directory=True)
    [entry] = list_entries(root, EXTS)
    assert entry.kind is EntryKind.directory


def test_directory_identity_follows_symlinks(tmp_path):
    real = tmp_path / "real"
    real.mkdir()
    link = tmp_path / "link"
    link.symlink_to(real, target_is_directory=True)
    assert directory_identity(link) == directory_identity(real)


def test_directory_identity_missing(tmp_path):
    with pytest.raises(DirectoryReadError):
        directory_identity(tmp_path / "nope")
