"""Factory helpers wiring a manager with its collaborators."""
from pathlib import Path
from typing import Optional, Union

from .config import KanbanConfig
from .data import FileBackedTaskManager
from .history import HistoryTracker
from .manager import TaskManager

def get_default_history() -> HistoryTracker:
    return HistoryTracker()

def get_default() -> TaskManager:
    """In-memory manager with an empty history."""
    return TaskManager(get_default_history())

def get_file_backed(file_path: Optional[Union[Path, str]] = None,
                    config: Optional[KanbanConfig] = None) -> FileBackedTaskManager:
    """Manager loaded from file_path, or from the configured data file if no path is given."""
    if file_path is None:
        if config is None:
            config = KanbanConfig.from_env()
        file_path = config.data_file
    return FileBackedTaskManager.load_from_file(file_path, get_default_history())
