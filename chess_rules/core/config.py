"""Application settings (read from the environment, with defaults for a standard game)"""

import os
from typing import Mapping

from pydantic import BaseModel, Field, ValidationError, field_validator

from chess_rules.chess.square import DEFAULT_BOARD_SIZE, MAX_BOARD_SIZE
from chess_rules.core.exceptions import ConfigurationError

ENV_PREFIX = "CHESS_RULES_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    # Rows are written as a single digit in the partial-game text, and the standard setup needs 8 columns
    board_size: int = Field(default=DEFAULT_BOARD_SIZE, ge=DEFAULT_BOARD_SIZE, le=MAX_BOARD_SIZE)
    database_url: str = "sqlite:///chess_rules.db"
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {value!r}. Pick one from {','.join(LOG_LEVELS)}")
        return level


def get_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build the settings from CHESS_RULES_* environment variables. Unset variables keep their default."""
    environ = os.environ if environ is None else environ
    values = {
        name: environ[f"{ENV_PREFIX}{name.upper()}"]
        for name in Settings.model_fields
        if f"{ENV_PREFIX}{name.upper()}" in environ
    }
    try:
        return Settings.model_validate(values)
    except ValidationError as error:
        raise ConfigurationError(f"Invalid settings: {error}") from error
