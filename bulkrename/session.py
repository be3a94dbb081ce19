"""Rename session: the operations offered to the command line."""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from bulkrename.errors import PersistenceError
from bulkrename.models.file import FileRecord, load_batch
from bulkrename.models.history import History, HistoryEntry
from bulkrename.models.rename import FilePreview, RenameResult
from bulkrename.processors.rename_processor import RenameProcessor
from bulkrename.processors.strategies import build_strategy


logger = logging.getLogger(__name__)


class HistoryRepository(Protocol):
    max_size: int

    def save(self, history: History) -> None: ...

    def load(self) -> History: ...


class HistoryService:
    """Keeps the in-memory history in sync with its repository."""

    def __init__(self, repository: HistoryRepository) -> None:
        self.repository = repository
        try:
            self.history = repository.load()
        except PersistenceError as e:
            logger.warning("Ignoring unreadable history: %s", e)
            self.history = History(max_size=repository.max_size)

    def add_entry(self, entry: HistoryEntry) -> None:
        """Record ``entry`` and save the history.

        Raises:
            PersistenceError: If the history cannot be saved.
        """
        self.history.add(entry)
        self.repository.save(self.history)

    def get_history(self) -> list[HistoryEntry]:
        """Reload the history from the repository and return its entries.

        Raises:
            PersistenceError: If the history cannot be read.
        """
        self.history = self.repository.load()
        return self.history.get_all()

    def clear(self) -> None:
        """Forget all entries and save the now empty history.

        Raises:
            PersistenceError: If the history cannot be saved.
        """
        self.history.clear()
        self.repository.save(self.history)


class RenameSession:
    """Current batch of files plus the transformation last previewed for it."""

    def __init__(self, processor: RenameProcessor, history: HistoryService) -> None:
        self.processor = processor
        self.history = history
        self.records: list[FileRecord] = []
        self._previewed: list[FileRecord] | None = None
        self._entry: HistoryEntry | None = None

    def load_files(self, paths: Iterable[str | Path]) -> list[Path]:
        """Make ``paths`` the current batch, discarding any pending preview."""
        self.records = load_batch(paths)
        self._previewed = None
        self._entry = None
        return [record.original_path for record in self.records]

    def generate_preview(
        self,
        pattern: str,
        replacement: str,
        is_regex: bool = False,
        case_insensitive: bool = False,
    ) -> list[FilePreview]:
        """Preview the transformation on the current batch.

        Raises:
            PatternCompilationError: If ``is_regex`` is set and the pattern is invalid.
                                     The previous preview is kept in that case.
        """
        if not self.records:
            return []

        strategy = build_strategy(pattern, replacement, is_regex, case_insensitive)
        self._previewed = self.processor.generate_preview(self.records, strategy)
        self._entry = HistoryEntry(
            pattern=pattern,
            replacement=replacement,
            is_regex=is_regex,
            case_insensitive=case_insensitive,
        )
        return [FilePreview.from_record(record) for record in self._previewed]

    def execute_rename(self, show_progress: bool = False) -> RenameResult:
        """Apply the last preview to disk.

        The resulting paths become the new batch. When at least one file was
        renamed the transformation is added to the history; failing to save
        the history does not fail the rename.
        """
        if self._previewed is None or self._entry is None:
            return RenameResult()

        result = self.processor.execute(self._previewed, show_progress=show_progress)
        entry = self._entry

        if result.new_paths:
            self.load_files(result.new_paths)

        if result.success_count > 0:
            try:
                self.history.add_entry(entry)
            except PersistenceError as e:
                logger.warning("Renamed files but could not record history: %s", e)

        return result

    def get_history(self) -> list[HistoryEntry]:
        return self.history.get_history()

    def add_to_history(self, entry: HistoryEntry) -> None:
        self.history.add_entry(entry)

    def clear_history(self) -> None:
        self.history.clear()
