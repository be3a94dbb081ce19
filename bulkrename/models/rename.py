"""Rename preview and result data models."""

from pathlib import Path

from pydantic import BaseModel, Field

from bulkrename.models.file import FileRecord


class FilePreview(BaseModel):
    """Preview of a single proposed rename, as shown to the user."""

    original_path: Path = Field(description="Path of the file before renaming")
    original_name: str = Field(description="Original filename (without directory path)")
    new_name: str = Field(description="Proposed filename (without directory path)")
    has_changed: bool = Field(description="Whether the file would be renamed")

    @classmethod
    def from_record(cls, record: FileRecord) -> "FilePreview":
        return cls(
            original_path=record.original_path,
            original_name=record.original_name,
            new_name=record.new_name,
            has_changed=record.has_changed,
        )

    def __str__(self) -> str:
        return f"FilePreview('{self.original_name}' -> '{self.new_name}', changed={self.has_changed})"


class RenameResult(BaseModel):
    """Outcome of executing a batch of renames.

    ``new_paths`` is parallel to the input batch: each position holds the
    file's path after execution, which is the original path when the file was
    unchanged or could not be renamed.
    """

    success_count: int = Field(default=0, description="Number of files renamed")
    failure_count: int = Field(default=0, description="Number of files that could not be renamed")
    errors: list[str] = Field(default_factory=list, description="Error messages, in batch order")
    new_paths: list[Path] = Field(default_factory=list, description="Resulting path of every file in the batch")

    @property
    def skipped_count(self) -> int:
        """Number of files left alone because their name did not change."""
        return len(self.new_paths) - self.success_count - self.failure_count

    @property
    def has_failures(self) -> bool:
        return self.failure_count > 0

    def __len__(self) -> int:
        return len(self.new_paths)
