"""Filesystem operations used by the rename engine."""

from pathlib import Path
from typing import Protocol


class FileSystem(Protocol):
    """Minimal filesystem interface needed to execute renames."""

    def rename(self, old_path: Path, new_path: Path) -> None:
        """Rename ``old_path`` to ``new_path``, raising OSError on failure."""
        ...

    def exists(self, path: Path) -> bool: ...


class LocalFileSystem:
    """FileSystem backed by the local disk."""

    def rename(self, old_path: Path, new_path: Path) -> None:
        Path(old_path).rename(new_path)

    def exists(self, path: Path) -> bool:
        return Path(path).exists()
