"""
FileBackedTaskManager - TaskManager that keeps its state in a text file.

Loading replays every record through the manager's own update operations,
so a file that breaks any rule of the in-memory manager (unknown epic,
duplicate id, overlapping time slots) is rejected as a whole. Every mutating
operation rewrites the whole file afterwards.
"""
from pathlib import Path
from typing import Optional, Union

from kanban.history import HistoryTracker
from kanban.logs import get_logger
from kanban.manager import TaskManager
from kanban.models import Task, Epic, Subtask, TaskType
from kanban.recovery import (
    CSVParsingError, FileOperationError, ManagerLoadError, ManagerSaveError, RecoverableError,
)
from .codec import FILE_HEADER, decode_record, encode_state, record_id_of
from .io import atomic_write, read_lines

log = get_logger("data")

class FileBackedTaskManager(TaskManager):

    def __init__(self, file_path: Union[Path, str], history: Optional[HistoryTracker] = None):
        super().__init__(history)
        self.file_path = Path(file_path)

    @classmethod
    def load_from_file(cls, file_path: Union[Path, str],
                       history: Optional[HistoryTracker] = None) -> 'FileBackedTaskManager':
        """
        Build a manager from a task file and rewrite the file from the loaded state.

        A missing or empty file gives an empty manager.

        Raises:
            ManagerLoadError: the file cannot be read or any record is invalid
            ManagerSaveError: the loaded state cannot be written back
        """
        if file_path is None:
            raise ManagerLoadError("cannot start: file is null")
        manager = cls(file_path, history)
        manager._load()
        manager.save()
        return manager

    def save(self):
        """Write the header and one record per live entity."""
        lines = encode_state(self)
        try:
            atomic_write(self.file_path, lines)
        except FileOperationError as e:
            raise ManagerSaveError(f'cannot write to file "{self.file_path}"') from e
        log.debug(f"Saved {len(lines) - 1} record(s) to {self.file_path}")

    def _load(self):
        try:
            lines = read_lines(self.file_path)
        except FileOperationError as e:
            raise ManagerLoadError(f'cannot load from file "{self.file_path}"') from e
        if not lines:
            log.info(f"No saved tasks in {self.file_path}")
            return
        if lines[0] != FILE_HEADER:
            raise ManagerLoadError(f'wrong file header, expected "{FILE_HEADER}"')

        loaded_ids = set()
        for number, line in enumerate(lines[1:], start=2):
            record_id = record_id_of(line)
            if record_id is None:
                raise ManagerLoadError(f"line {number} does not start with numeric id")
            if record_id in loaded_ids:
                raise ManagerLoadError(f"duplicate id={record_id}")
            try:
                self._replay(decode_record(line))
            except (CSVParsingError, RecoverableError) as e:
                raise ManagerLoadError(f"{e} for id={record_id}") from e
            loaded_ids.add(record_id)
        log.info(f"Loaded {len(loaded_ids)} record(s) from {self.file_path}")

    def _replay(self, task: Task):
        # Bypass the saving overrides; the file is rewritten once after loading
        if task.type == TaskType.SUBTASK:
            super().update_subtask(task)
        elif task.type == TaskType.EPIC:
            super().update_epic(task)
        else:
            super().update_task(task)

    def delete_all_tasks(self):
        super().delete_all_tasks()
        self.save()

    def create_task(self, task: Task) -> int:
        task_id = super().create_task(task)
        self.save()
        return task_id

    def update_task(self, task: Task):
        super().update_task(task)
        self.save()

    def delete_task(self, task_id: int):
        super().delete_task(task_id)
        self.save()

    def delete_all_epics(self):
        super().delete_all_epics()
        self.save()

    def create_epic(self, epic: Epic) -> int:
        epic_id = super().create_epic(epic)
        self.save()
        return epic_id

    def update_epic(self, epic: Epic):
        super().update_epic(epic)
        self.save()

    def delete_epic(self, epic_id: int):
        super().delete_epic(epic_id)
        self.save()

    def delete_all_subtasks(self):
        super().delete_all_subtasks()
        self.save()

    def create_subtask(self, subtask: Subtask) -> int:
        subtask_id = super().create_subtask(subtask)
        self.save()
        return subtask_id

    def update_subtask(self, subtask: Subtask):
        super().update_subtask(subtask)
        self.save()

    def delete_subtask(self, subtask_id: int):
        super().delete_subtask(subtask_id)
        self.save()
