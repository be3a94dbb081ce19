"""Rename history data models."""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field


# Number of transformations remembered before the oldest ones are dropped
MAX_HISTORY_SIZE = 100


class HistoryEntry(BaseModel):
    """Parameters of a single past transformation.

    Entries are immutable and compare equal when all four fields match.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pattern: str = Field(description="Text or regular expression that was searched for")
    replacement: str = Field(description="Replacement text")
    is_regex: bool = Field(default=False, alias="isRegex", description="Whether the pattern is a regular expression")
    case_insensitive: bool = Field(
        default=False,
        alias="caseInsensitive",
        description="Whether matching ignored case",
    )

    def __str__(self) -> str:
        flags = []
        if self.is_regex:
            flags.append("regex")
        if self.case_insensitive:
            flags.append("ignore-case")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        return f"'{self.pattern}' -> '{self.replacement}'{suffix}"


class History:
    """Bounded, deduplicated list of history entries, most recent first."""

    def __init__(self, max_size: int = MAX_HISTORY_SIZE) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self.max_size = max_size
        self._entries: list[HistoryEntry] = []

    def add(self, entry: HistoryEntry) -> None:
        """Record ``entry`` as the most recent transformation.

        An equal entry already in the history is moved to the front rather
        than duplicated.
        """
        for ix, existing in enumerate(self._entries):
            if existing == entry:
                if ix > 0:
                    self._entries[1 : ix + 1] = self._entries[0:ix]
                    self._entries[0] = entry
                return

        self._entries.insert(0, entry)
        del self._entries[self.max_size :]

    def get_all(self) -> list[HistoryEntry]:
        """Return the entries, most recent first."""
        return list(self._entries)

    def clear(self) -> None:
        self._entries = []

    def set_entries(self, entries: Iterable[HistoryEntry]) -> None:
        """Replace the contents with an already deduplicated, most-recent-first sequence."""
        self._entries = list(entries)[: self.max_size]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self.get_all())
