"""File snapshot collaborators: enumerate build files and hash their contents."""
import logging
from pathlib import Path
from typing import Mapping, Protocol, Union

from swmanifest.tools.fs_scan import compute_sha1, compute_sha1_bytes, scan_files

logger = logging.getLogger(__name__)


class Filesystem(Protocol):
    """Read-only view of a deployed file tree."""

    def list(self, path: str) -> list[str]:
        """Every file under `path`, as `/`-rooted paths."""
        ...

    def hash(self, path: str) -> str:
        """Content fingerprint of one file."""
        ...


class LocalFilesystem:
    """A build output directory on disk."""

    def __init__(self, root_dir: Path):
        self.root_dir = Path(root_dir)

    def _resolve(self, path: str) -> Path:
        return self.root_dir / path.lstrip("/")

    def list(self, path: str) -> list[str]:
        base = self._resolve(path)
        rel = base.relative_to(self.root_dir).as_posix()
        prefix = "" if rel == "." else "/" + rel
        files = [prefix + file for file in scan_files(base)]
        logger.debug(f"Listed {len(files)} files under {base}")
        return files

    def hash(self, path: str) -> str:
        return compute_sha1(self._resolve(path))


class MemoryFilesystem:
    """A file tree held in memory, mapping `/`-rooted paths to contents."""

    def __init__(self, files: Mapping[str, Union[str, bytes]]):
        self.files = dict(files)

    def list(self, path: str) -> list[str]:
        prefix = path if path.endswith("/") else path + "/"
        return [file for file in self.files if file.startswith(prefix)]

    def hash(self, path: str) -> str:
        if path not in self.files:
            raise FileNotFoundError(path)
        content = self.files[path]
        if isinstance(content, str):
            content = content.encode("utf-8")
        return compute_sha1_bytes(content)
