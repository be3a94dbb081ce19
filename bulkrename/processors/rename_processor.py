"""File rename processor: preview generation and collision-safe execution."""

import logging
import os
from pathlib import Path

from tqdm import tqdm

from bulkrename.errors import ConflictResolutionExhausted, RenameFailed
from bulkrename.filesystem import FileSystem, LocalFileSystem
from bulkrename.models.file import FileRecord
from bulkrename.models.rename import RenameResult
from bulkrename.processors.strategies import RenameStrategy


logger = logging.getLogger(__name__)

# Maximum numeric suffix tried when looking for a free file name
DEFAULT_MAX_COLLISION_ATTEMPTS = 1000

# Proposed names that would point at the directory itself rather than a file
_INVALID_NAMES = frozenset({"", ".", ".."})


class RenameProcessor:
    """Processor for previewing and applying pattern-based file renames."""

    def __init__(
        self,
        filesystem: FileSystem | None = None,
        max_collision_attempts: int = DEFAULT_MAX_COLLISION_ATTEMPTS,
    ) -> None:
        """Initialize the rename processor.

        Args:
            filesystem: Filesystem used to check for and rename files. Defaults to the local disk.
            max_collision_attempts: Number of numbered candidates tried before giving up on a
                                    file whose proposed name is already taken.
        """
        if max_collision_attempts < 1:
            raise ValueError(f"max_collision_attempts must be at least 1, got {max_collision_attempts}")
        self.filesystem = filesystem if filesystem is not None else LocalFileSystem()
        self.max_collision_attempts = max_collision_attempts

    def generate_preview(self, records: list[FileRecord], strategy: RenameStrategy) -> list[FileRecord]:
        """Compute the proposed name of every record without touching disk.

        Each proposal is computed from the record's original name, so calling
        this again with another strategy replaces earlier proposals instead of
        building on them.

        Args:
            records: Batch of file records.
            strategy: Strategy used to transform each original name.

        Returns:
            New records, in the same order, carrying the proposed names.
        """
        return [record.with_new_name(strategy.apply(record.original_name)) for record in records]

    def execute(self, records: list[FileRecord], show_progress: bool = False) -> RenameResult:
        """Rename every changed record, in order, skipping files that fail.

        Files whose proposed name is taken are renamed to the first free
        numbered variant (``name1.ext``, ``name2.ext``, ...). A failure for
        one file never stops the rest of the batch, and completed renames are
        never rolled back.

        Args:
            records: Previewed batch of file records.
            show_progress: Display a progress bar while renaming.

        Returns:
            RenameResult whose ``new_paths`` has one entry per input record.
        """
        result = RenameResult()

        for record in tqdm(records, desc="Renaming files...", disable=not show_progress):
            if not record.has_changed:
                result.new_paths.append(record.original_path)
                continue

            try:
                target = self._resolve_target(record)
                self._rename(record, target)
            except (ConflictResolutionExhausted, RenameFailed) as e:
                logger.warning("%s", e)
                result.failure_count += 1
                result.errors.append(str(e))
                result.new_paths.append(record.original_path)
                continue

            result.success_count += 1
            result.new_paths.append(target)

        logger.debug(
            "Rename batch finished: %d renamed, %d failed, %d unchanged",
            result.success_count,
            result.failure_count,
            result.skipped_count,
        )
        return result

    def _resolve_target(self, record: FileRecord) -> Path:
        """Pick the path a record should be renamed to.

        Args:
            record: Record with a changed proposed name.

        Returns:
            The proposed path, or the first free numbered variant of it if the
            proposed path already exists.

        Raises:
            RenameFailed: If the proposed name is not a usable file name.
            ConflictResolutionExhausted: If every candidate up to the limit exists.
        """
        if record.new_name in _INVALID_NAMES:
            raise RenameFailed(record.original_name, ValueError(f"invalid new name '{record.new_name}'"))

        target = record.new_path
        if target == record.original_path or not self.filesystem.exists(target):
            return target

        base, ext = os.path.splitext(record.new_name)
        for counter in range(1, self.max_collision_attempts + 1):
            candidate = record.directory / f"{base}{counter}{ext}"
            if not self.filesystem.exists(candidate):
                logger.info("'%s' already exists, using '%s' instead", target.name, candidate.name)
                return candidate

        raise ConflictResolutionExhausted(record.original_name, self.max_collision_attempts)

    def _rename(self, record: FileRecord, target: Path) -> None:
        """Rename a single file.

        Raises:
            RenameFailed: If the filesystem reports an error.
        """
        try:
            self.filesystem.rename(record.original_path, target)
        except OSError as e:
            raise RenameFailed(record.original_name, e) from e
        logger.debug("Renamed '%s' -> '%s'", record.original_path, target)
