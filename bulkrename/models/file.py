"""File record data model."""

from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, computed_field


class FileRecord(BaseModel):
    """A file in the current batch together with its proposed new name.

    ``original_path``, ``original_name`` and ``directory`` are fixed when the
    record is created. Only ``new_name`` may change.
    """

    model_config = ConfigDict(validate_assignment=True)

    original_path: Path = Field(frozen=True, description="Path of the file as it was loaded")
    original_name: str = Field(frozen=True, description="File name without directory")
    directory: Path = Field(frozen=True, description="Directory containing the file")
    new_name: str = Field(description="Proposed new file name (without directory)")

    @classmethod
    def from_path(cls, path: str | Path) -> "FileRecord":
        """Create a record for ``path`` with no rename proposed."""
        path = Path(path)
        return cls(original_path=path, original_name=path.name, directory=path.parent, new_name=path.name)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def new_path(self) -> Path:
        """Full path the file would have after renaming."""
        return self.directory / self.new_name

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_changed(self) -> bool:
        """Whether the proposed name differs from the original one."""
        return self.original_name != self.new_name

    def with_new_name(self, new_name: str) -> "FileRecord":
        """Return a copy of this record proposing ``new_name``."""
        return self.model_copy(update={"new_name": new_name})

    def __str__(self) -> str:
        return f"FileRecord('{self.original_name}' -> '{self.new_name}')"


def load_batch(paths: Iterable[str | Path]) -> list[FileRecord]:
    """Build a fresh batch of records from file paths, preserving order."""
    return [FileRecord.from_path(path) for path in paths]
