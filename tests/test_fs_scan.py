"""Tests for swmanifest.tools.fs_scan and the filesystem collaborators."""
import hashlib
from pathlib import Path

import pytest

from swmanifest.tools.filesystem import LocalFilesystem, MemoryFilesystem
from swmanifest.tools.fs_scan import compute_sha1, scan_files


def test_scan_files_empty_dir(tmp_path: Path) -> None:
    assert scan_files(tmp_path) == []


def test_scan_files_missing_dir(tmp_path: Path) -> None:
    assert scan_files(tmp_path / "missing") == []


def test_scan_files_lists_rooted_paths(tmp_path: Path) -> None:
    (tmp_path / "b.js").write_text("x")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "a.css").write_text("y")
    assert scan_files(tmp_path) == ["/b.js", "/sub/a.css"]


def test_compute_sha1(tmp_path: Path) -> None:
    path = tmp_path / "main.js"
    path.write_bytes(b"console.log(1);")
    assert compute_sha1(path) == hashlib.sha1(b"console.log(1);").hexdigest()


def test_local_filesystem_list_and_hash(tmp_path: Path) -> None:
    (tmp_path / "index.html").write_text("<html></html>")
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "logo.svg").write_text("<svg/>")
    fs = LocalFilesystem(tmp_path)
    assert fs.list("/") == ["/assets/logo.svg", "/index.html"]
    assert fs.list("/assets") == ["/assets/logo.svg"]
    assert fs.hash("/index.html") == hashlib.sha1(b"<html></html>").hexdigest()


def test_memory_filesystem() -> None:
    fs = MemoryFilesystem({"/a.js": "a", "/lib/b.js": b"b"})
    assert sorted(fs.list("/")) == ["/a.js", "/lib/b.js"]
    assert fs.list("/lib") == ["/lib/b.js"]
    assert fs.hash("/lib/b.js") == hashlib.sha1(b"b").hexdigest()
    with pytest.raises(FileNotFoundError):
        fs.hash("/missing.js")
