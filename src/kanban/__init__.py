"""
Kanban - a task manager for plain tasks, epics and their subtasks.

This package provides an in-memory task manager with a shared id space,
derived epic status and time window, an overlap-free schedule of timed work,
a recently-viewed history and a line-oriented text file for persistence.
"""

from .version import VERSION
from .models import (
    TaskStatus,
    TaskType,
    Task,
    Epic,
    Subtask,
)
from .manager import TaskManager
from .data import FileBackedTaskManager
from .managers import get_default, get_default_history, get_file_backed

__version__ = VERSION

__all__ = [
    "VERSION",
    "TaskStatus",
    "TaskType",
    "Task",
    "Epic",
    "Subtask",
    "TaskManager",
    "FileBackedTaskManager",
    "get_default",
    "get_default_history",
    "get_file_backed",
]
