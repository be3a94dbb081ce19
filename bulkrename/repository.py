"""JSON persistence for the rename history."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from bulkrename.errors import PersistenceError
from bulkrename.models.history import MAX_HISTORY_SIZE, History, HistoryEntry


logger = logging.getLogger(__name__)


class HistoryDocument(BaseModel):
    """On-disk layout of the history file."""

    entries: list[HistoryEntry] = Field(
        default_factory=list,
        description="Past transformations, most recent first",
    )

    @field_validator("entries", mode="before")
    @classmethod
    def _null_entries_as_empty(cls, value: object) -> object:
        return [] if value is None else value


class JSONHistoryRepository:
    """Loads and saves a History as an indented JSON document."""

    def __init__(self, path: str | Path, max_size: int = MAX_HISTORY_SIZE) -> None:
        self.path = Path(path)
        self.max_size = max_size

    def save(self, history: History) -> None:
        """Write ``history`` to disk, creating parent directories as needed.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        document = HistoryDocument(entries=history.get_all())
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(document.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        except OSError as e:
            raise PersistenceError(self.path, f"Could not save history ({e})") from e

        logger.debug("Saved %d history entries to %s", len(history), self.path)

    def load(self) -> History:
        """Read the history from disk.

        A missing file is not an error and yields an empty history.

        Raises:
            PersistenceError: If the file cannot be read or is not a valid history document.
        """
        history = History(max_size=self.max_size)
        if not self.path.exists():
            logger.debug("No history file at %s, starting empty", self.path)
            return history

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(self.path, f"Could not read history ({e})") from e

        try:
            document = HistoryDocument.model_validate_json(raw)
        except ValidationError as e:
            raise PersistenceError(self.path, f"Invalid history file ({e.error_count()} error(s))") from e

        # Stored most recent first; adding oldest first reproduces the same order
        for entry in reversed(document.entries):
            history.add(entry)

        logger.debug("Loaded %d history entries from %s", len(history), self.path)
        return history
