"""Shared test fixtures."""

from pathlib import Path

import pytest


class FakeFileSystem:
    """In-memory filesystem recording rename calls."""

    def __init__(self, existing: list[str | Path] | None = None) -> None:
        self.files: set[Path] = {Path(p) for p in existing or []}
        self.renames: list[tuple[Path, Path]] = []
        self.failures: dict[Path, OSError] = {}

    def fail_on(self, path: str | Path, error: OSError) -> None:
        self.failures[Path(path)] = error

    def rename(self, old_path: Path, new_path: Path) -> None:
        old_path, new_path = Path(old_path), Path(new_path)
        self.renames.append((old_path, new_path))
        if old_path in self.failures:
            raise self.failures[old_path]
        if old_path not in self.files:
            raise FileNotFoundError(f"No such file: {old_path}")
        self.files.discard(old_path)
        self.files.add(new_path)

    def exists(self, path: Path) -> bool:
        return Path(path) in self.files


@pytest.fixture
def fake_fs() -> FakeFileSystem:
    return FakeFileSystem()
