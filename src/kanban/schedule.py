"""
ScheduleIndex - tasks and subtasks with a start time, kept in chronological order.

The index never holds two overlapping intervals, so checking a candidate only
needs its nearest neighbours on either side of its start time.
"""
from bisect import bisect_left, insort
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from .models import Task

class ScheduleIndex:
    """Sorted (start_time, id) keys plus id -> item lookup."""

    def __init__(self):
        self._keys: List[Tuple[datetime, int]] = []
        self._items: Dict[int, Task] = {}

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, task_id: int) -> bool:
        return task_id in self._items

    @staticmethod
    def overlaps(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
        """Half-open intervals; touching ends do not overlap."""
        return start_a < end_b and start_b < end_a

    def would_overlap(self, task: Task, excluding_id: Optional[int] = None) -> bool:
        """Whether the task's interval intersects any entry other than excluding_id."""
        if task.start_time is None or task.end_time is None:
            return False
        start, end = task.start_time, task.end_time
        position = bisect_left(self._keys, (start, -1))

        # Nearest entry starting before the candidate
        for i in range(position - 1, -1, -1):
            entry = self._items[self._keys[i][1]]
            if entry.id == excluding_id:
                continue
            if self.overlaps(start, end, entry.start_time, entry.end_time):
                return True
            break

        # Nearest entry starting at or after the candidate
        for i in range(position, len(self._keys)):
            entry = self._items[self._keys[i][1]]
            if entry.id == excluding_id:
                continue
            if self.overlaps(start, end, entry.start_time, entry.end_time):
                return True
            break

        return False

    def insert(self, task: Task):
        """Add a task; tasks without a start time are ignored."""
        if task.start_time is None:
            return
        if task.id in self._items:
            self.remove(task.id)
        insort(self._keys, (task.start_time, task.id))
        self._items[task.id] = task

    def remove(self, task_id: int):
        task = self._items.pop(task_id, None)
        if task is None:
            return
        position = bisect_left(self._keys, (task.start_time, task.id))
        del self._keys[position]

    def replace(self, task: Task):
        """Swap in the new version of a task, dropping it if it lost its start time."""
        self.remove(task.id)
        self.insert(task)

    def clear(self):
        self._keys.clear()
        self._items.clear()

    def items(self) -> List[Task]:
        """Indexed tasks in chronological order."""
        return [self._items[task_id] for _, task_id in self._keys]
