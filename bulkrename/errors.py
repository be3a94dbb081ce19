"""Exception types raised by the rename engine and the history store."""

from pathlib import Path


class RenameError(Exception):
    """Base class for all bulkrename errors."""


class PatternCompilationError(RenameError, ValueError):
    """Raised when a regular expression pattern cannot be compiled."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid regular expression '{pattern}': {reason}")


class ConflictResolutionExhausted(RenameError):
    """Raised when no free name is found for a file within the probe bound."""

    def __init__(self, name: str, attempts: int) -> None:
        self.name = name
        self.attempts = attempts
        super().__init__(f"Failed to rename {name}: no available name found after {attempts} attempts")


class RenameFailed(RenameError):
    """Raised when the underlying rename call fails for a single file."""

    def __init__(self, name: str, cause: Exception) -> None:
        self.name = name
        self.cause = cause
        super().__init__(f"Failed to rename {name}: {cause}")


class PersistenceError(RenameError):
    """Raised when the history file cannot be read, parsed or written."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"{message}: {path}")
