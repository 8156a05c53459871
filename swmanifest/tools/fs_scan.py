"""Scan a build output directory and compute SHA-1 content hashes."""
import hashlib
from pathlib import Path


def scan_files(root_dir: Path) -> list[str]:
    """
    Scan root_dir recursively and return every regular file.

    Paths are POSIX-style, relative to root_dir and rooted at `/`
    (e.g. `/assets/logo.png`), sorted for stable enumeration.
    """
    if not root_dir.is_dir():
        return []

    results = []
    for file_path in root_dir.rglob("*"):
        if not file_path.is_file():
            continue
        rel_path = file_path.relative_to(root_dir).as_posix()
        results.append("/" + rel_path)

    return sorted(results)


def compute_sha1(file_path: Path) -> str:
    """Compute SHA-1 hash of a file."""
    sha1 = hashlib.sha1()
    with open(file_path, "rb") as f:
        # Read in chunks to handle large files
        for chunk in iter(lambda: f.read(8192), b""):
            sha1.update(chunk)
    return sha1.hexdigest()


def compute_sha1_bytes(content: bytes) -> str:
    """Compute SHA-1 hash of in-memory content."""
    return hashlib.sha1(content).hexdigest()
