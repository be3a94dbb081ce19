"""Runtime configuration."""

import os
from pathlib import Path

import click
from pydantic import BaseModel, Field

from bulkrename.models.history import MAX_HISTORY_SIZE
from bulkrename.processors.rename_processor import DEFAULT_MAX_COLLISION_ATTEMPTS


APP_NAME = "bulkrename"

# Environment variables that override the defaults
HISTORY_FILE_ENV = "BULKRENAME_HISTORY_FILE"
MAX_ATTEMPTS_ENV = "BULKRENAME_MAX_ATTEMPTS"


def default_history_path() -> Path:
    """Location of the history file inside the per-user application directory."""
    return Path(click.get_app_dir(APP_NAME)) / "config.json"


class Settings(BaseModel):
    """Settings shared by the CLI and the rename session."""

    history_path: Path = Field(default_factory=default_history_path, description="Path of the history JSON file")
    max_history_size: int = Field(default=MAX_HISTORY_SIZE, ge=1, description="Number of transformations remembered")
    max_collision_attempts: int = Field(
        default=DEFAULT_MAX_COLLISION_ATTEMPTS,
        ge=1,
        description="Numbered name variants tried when a target name is taken",
    )

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if env.get(HISTORY_FILE_ENV):
            values["history_path"] = Path(env[HISTORY_FILE_ENV]).expanduser()
        if env.get(MAX_ATTEMPTS_ENV):
            values["max_collision_attempts"] = env[MAX_ATTEMPTS_ENV]
        return cls.model_validate(values)
