"""
Runtime configuration for the task manager.

Values come from ``KANBAN_*`` environment variables so the CLI and tests can
point the engine at a different task file or log directory without code changes.
"""
import os
import logging
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_DATA_FILE = Path("kanban.csv")
DEFAULT_LOG_DIR = Path.home() / ".local" / "share" / "kanban" / "logs"

TRUE_VALUES = ('1', 'true', 'yes')


class KanbanConfig(BaseModel):
    """Settings shared by the CLI, logging and the file-backed manager."""

    data_file: Path = Field(default=DEFAULT_DATA_FILE, description="File the task manager state is stored in")
    log_level: str = Field(default="WARNING", description="Console log level name")
    debug: bool = Field(default=False, description="Verbose console logging")
    log_dir: Path = Field(default=DEFAULT_LOG_DIR, description="Directory of the detailed log file")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        v = v.upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"Unknown log level: {v}")
        return v

    @property
    def console_level(self) -> int:
        if self.debug:
            return logging.DEBUG
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'KanbanConfig':
        """Build a config from environment variables, falling back to defaults."""
        if environ is None:
            environ = os.environ

        values = {}
        if environ.get('KANBAN_DATA_FILE'):
            values['data_file'] = Path(environ['KANBAN_DATA_FILE'])
        if environ.get('KANBAN_LOG_LEVEL'):
            values['log_level'] = environ['KANBAN_LOG_LEVEL']
        if environ.get('KANBAN_LOG_DIR'):
            values['log_dir'] = Path(environ['KANBAN_LOG_DIR'])
        values['debug'] = environ.get('KANBAN_DEBUG', '').lower() in TRUE_VALUES
        return cls(**values)
