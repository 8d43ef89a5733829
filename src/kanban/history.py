"""Recently viewed entities, oldest first."""
from collections import OrderedDict
from typing import List

from .models import Task
from .recovery import ManagerValidationError

class HistoryTracker:
    """Snapshots of accessed entities, at most one per id, most recent last."""

    def __init__(self):
        self._entries: 'OrderedDict[int, Task]' = OrderedDict()

    def add(self, task: Task):
        if task is None:
            raise ManagerValidationError("cannot add null to visited tasks history")
        if task.id is None:
            raise ManagerValidationError("cannot add task with null id to visited tasks history")
        self._entries.pop(task.id, None)
        self._entries[task.id] = task.snapshot()

    def remove(self, task_id: int):
        self._entries.pop(task_id, None)

    def get_history(self) -> List[Task]:
        return [task.snapshot() for task in self._entries.values()]

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, task_id: int) -> bool:
        return task_id in self._entries
