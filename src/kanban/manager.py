"""
TaskManager - in-memory store for tasks, epics and subtasks.

Every mutating call validates in a fixed order before anything is touched:
null input, id/kind, field shape (status, duration/start time pair),
epic reference, then the time slot. The first failing check decides the
error raised, and a rejected call leaves the manager unchanged.
"""
from typing import Dict, List, Optional, Type

from .aggregator import refresh_epic
from .history import HistoryTracker
from .identity import IdentityRegistry
from .logs import get_logger
from .models import Task, Epic, Subtask, TaskType
from .recovery import (
    ManagerValidationError, TaskOverlapError, TaskNotFoundError,
    EpicReferenceError, KindMismatchError,
)
from .schedule import ScheduleIndex

log = get_logger("manager")

class TaskManager:
    """Create/read/update/delete for the three kinds plus history and schedule queries."""

    def __init__(self, history: Optional[HistoryTracker] = None):
        self.tasks: Dict[int, Task] = {}
        self.epics: Dict[int, Epic] = {}
        self.subtasks: Dict[int, Subtask] = {}
        self.registry = IdentityRegistry()
        self.schedule = ScheduleIndex()
        self.history = history if history is not None else HistoryTracker()

    # --- Tasks ---

    def get_tasks(self) -> List[Task]:
        return [task.snapshot() for task in self.tasks.values()]

    def delete_all_tasks(self):
        task_ids = list(self.tasks)
        self.tasks.clear()
        for task_id in task_ids:
            self._evict(task_id)
        log.info(f"Deleted all tasks ({len(task_ids)})")

    def get_task_by_id(self, task_id: int) -> Task:
        task = self._require_task(task_id)
        self.history.add(task)
        return task.snapshot()

    def create_task(self, task: Task) -> int:
        """Store a copy of the task under a fresh id and return the id."""
        self._require_input(task, Task, "create")
        task = task.snapshot()
        self._validate_fields(task)
        self._require_free_slot(task)
        task.id = self.registry.next_id()
        self.registry.register(task.id, TaskType.TASK)
        self.tasks[task.id] = task
        self.schedule.insert(task)
        log.info(f"Created task id={task.id}")
        return task.id

    def update_task(self, task: Task):
        """Replace the task with the given id, creating it there if the id is unused."""
        self._require_input(task, Task, "update")
        self._require_update_id(task, TaskType.TASK)
        task = task.snapshot()
        self._validate_fields(task)
        self._require_free_slot(task, excluding_id=task.id)
        is_new = task.id not in self.tasks
        self.registry.register(task.id, TaskType.TASK)
        self.tasks[task.id] = task
        self.schedule.replace(task)
        log.info(f"{'Inserted' if is_new else 'Updated'} task id={task.id}")

    def delete_task(self, task_id: int):
        self._require_task(task_id)
        del self.tasks[task_id]
        self._evict(task_id)
        log.info(f"Deleted task id={task_id}")

    # --- Epics ---

    def get_epics(self) -> List[Epic]:
        return [epic.snapshot() for epic in self.epics.values()]

    def delete_all_epics(self):
        subtask_ids = list(self.subtasks)
        epic_ids = list(self.epics)
        self.subtasks.clear()
        for subtask_id in subtask_ids:
            self._evict(subtask_id)
        self.epics.clear()
        for epic_id in epic_ids:
            self._evict(epic_id)
        log.info(f"Deleted all epics ({len(epic_ids)}) and their subtasks ({len(subtask_ids)})")

    def get_epic_by_id(self, epic_id: int) -> Epic:
        epic = self._require_epic(epic_id)
        self.history.add(epic)
        return epic.snapshot()

    def create_epic(self, epic: Epic) -> int:
        """
        Store a copy of the epic under a fresh id and return the id.

        Subtask ids, status, duration and start time supplied by the caller are
        discarded; a new epic has no subtasks.
        """
        self._require_input(epic, Epic, "create")
        epic = epic.snapshot()
        epic.subtask_ids = []
        epic.id = self.registry.next_id()
        self.registry.register(epic.id, TaskType.EPIC)
        self.epics[epic.id] = epic
        self._refresh_epic(epic.id)
        log.info(f"Created epic id={epic.id}")
        return epic.id

    def update_epic(self, epic: Epic):
        """Replace title and description of an epic, creating it if the id is unused."""
        self._require_input(epic, Epic, "update")
        self._require_update_id(epic, TaskType.EPIC)
        epic = epic.snapshot()
        saved = self.epics.get(epic.id)
        epic.subtask_ids = list(saved.subtask_ids) if saved is not None else []
        self.registry.register(epic.id, TaskType.EPIC)
        self.epics[epic.id] = epic
        self._refresh_epic(epic.id)
        log.info(f"{'Inserted' if saved is None else 'Updated'} epic id={epic.id}")

    def delete_epic(self, epic_id: int):
        epic = self._require_epic(epic_id)
        del self.epics[epic_id]
        for subtask_id in epic.subtask_ids:
            del self.subtasks[subtask_id]
            self._evict(subtask_id)
        self._evict(epic_id)
        log.info(f"Deleted epic id={epic_id} with {len(epic.subtask_ids)} subtask(s)")

    def get_epic_subtasks(self, epic_id: int) -> List[Subtask]:
        """Subtasks of an epic in the order they were added to it."""
        epic = self._require_epic(epic_id)
        return [self.subtasks[subtask_id].snapshot() for subtask_id in epic.subtask_ids]

    # --- Subtasks ---

    def get_subtasks(self) -> List[Subtask]:
        return [subtask.snapshot() for subtask in self.subtasks.values()]

    def delete_all_subtasks(self):
        subtask_ids = list(self.subtasks)
        self.subtasks.clear()
        for subtask_id in subtask_ids:
            self._evict(subtask_id)
        for epic in self.epics.values():
            epic.subtask_ids = []
            self._refresh_epic(epic.id)
        log.info(f"Deleted all subtasks ({len(subtask_ids)})")

    def get_subtask_by_id(self, subtask_id: int) -> Subtask:
        subtask = self._require_subtask(subtask_id)
        self.history.add(subtask)
        return subtask.snapshot()

    def create_subtask(self, subtask: Subtask) -> int:
        """Store a copy of the subtask under a fresh id, attach it to its epic and return the id."""
        self._require_input(subtask, Subtask, "create")
        subtask = subtask.snapshot()
        self._validate_fields(subtask)
        self._require_epic_reference(subtask)
        self._require_free_slot(subtask)
        subtask.id = self.registry.next_id()
        self.registry.register(subtask.id, TaskType.SUBTASK)
        self.subtasks[subtask.id] = subtask
        self.epics[subtask.epic_id].subtask_ids.append(subtask.id)
        self.schedule.insert(subtask)
        self._refresh_epic(subtask.epic_id)
        log.info(f"Created subtask id={subtask.id} in epic id={subtask.epic_id}")
        return subtask.id

    def update_subtask(self, subtask: Subtask):
        """
        Replace the subtask with the given id, creating it there if the id is unused.

        A changed epic id moves the subtask to the end of the new epic's list;
        both epics are recomputed.
        """
        self._require_input(subtask, Subtask, "update")
        self._require_update_id(subtask, TaskType.SUBTASK)
        subtask = subtask.snapshot()
        self._validate_fields(subtask)
        self._require_epic_reference(subtask)
        self._require_free_slot(subtask, excluding_id=subtask.id)

        saved = self.subtasks.get(subtask.id)
        self.registry.register(subtask.id, TaskType.SUBTASK)
        self.subtasks[subtask.id] = subtask
        self.schedule.replace(subtask)

        if saved is None:
            self.epics[subtask.epic_id].subtask_ids.append(subtask.id)
        elif saved.epic_id != subtask.epic_id:
            self.epics[saved.epic_id].subtask_ids.remove(subtask.id)
            self.epics[subtask.epic_id].subtask_ids.append(subtask.id)
            self._refresh_epic(saved.epic_id)
            log.debug(f"Moved subtask id={subtask.id} from epic id={saved.epic_id} to epic id={subtask.epic_id}")
        self._refresh_epic(subtask.epic_id)
        log.info(f"{'Inserted' if saved is None else 'Updated'} subtask id={subtask.id}")

    def delete_subtask(self, subtask_id: int):
        subtask = self._require_subtask(subtask_id)
        del self.subtasks[subtask_id]
        self.epics[subtask.epic_id].subtask_ids.remove(subtask_id)
        self._refresh_epic(subtask.epic_id)
        self._evict(subtask_id)
        log.info(f"Deleted subtask id={subtask_id}")

    # --- Cross-cutting queries ---

    def get_history(self) -> List[Task]:
        return self.history.get_history()

    def get_prioritized_tasks(self) -> List[Task]:
        """Tasks and subtasks with a start time, earliest first."""
        return [task.snapshot() for task in self.schedule.items()]

    # --- Validation ---

    def _require_input(self, task: Task, model: Type[Task], action: str):
        if task is None:
            message = "cannot create from null" if action == "create" else "cannot apply null update"
            log.debug(message)
            raise ManagerValidationError(message)
        if type(task) is not model:
            message = f"cannot {action} {model.__name__.lower()} from {type(task).__name__}"
            log.debug(message)
            raise ManagerValidationError(message)

    def _require_update_id(self, task: Task, kind: TaskType):
        if task.id is None:
            log.debug(f"Rejected {kind.value.lower()} update without id")
            raise ManagerValidationError("cannot update: id is null")
        owner = self.registry.kind_of(task.id)
        if owner is not None and owner != kind:
            message = f"id={task.id} belongs to {owner.value.lower()}, cannot update as {kind.value.lower()}"
            log.debug(message)
            raise KindMismatchError(message)

    def _validate_fields(self, task: Task):
        if task.status is None:
            raise ManagerValidationError("status cannot be null")
        if (task.duration is None) != (task.start_time is None):
            raise ManagerValidationError("duration and start time must be either both set or both null")
        if task.duration is not None and task.duration.total_seconds() <= 0:
            raise ManagerValidationError("duration cannot be negative or zero")

    def _require_epic_reference(self, subtask: Subtask):
        if subtask.epic_id is None:
            raise EpicReferenceError("epic id cannot be null")
        if self.registry.kind_of(subtask.epic_id) != TaskType.EPIC:
            log.debug(f"Subtask refers to missing epic id={subtask.epic_id}")
            raise EpicReferenceError(f"no epic with id={subtask.epic_id}")

    def _require_free_slot(self, task: Task, excluding_id: Optional[int] = None):
        if self.schedule.would_overlap(task, excluding_id):
            log.debug(f"Time slot {task.start_time} - {task.end_time} is taken")
            raise TaskOverlapError("conflict with another task for time slot")

    def _require_task(self, task_id: int) -> Task:
        task = self.tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(f"no task with id={task_id}")
        return task

    def _require_epic(self, epic_id: int) -> Epic:
        epic = self.epics.get(epic_id)
        if epic is None:
            raise TaskNotFoundError(f"no epic with id={epic_id}")
        return epic

    def _require_subtask(self, subtask_id: int) -> Subtask:
        subtask = self.subtasks.get(subtask_id)
        if subtask is None:
            raise TaskNotFoundError(f"no subtask with id={subtask_id}")
        return subtask

    # --- Bookkeeping ---

    def _refresh_epic(self, epic_id: int):
        epic = self.epics[epic_id]
        refresh_epic(epic, (self.subtasks[subtask_id] for subtask_id in epic.subtask_ids))

    def _evict(self, entity_id: int):
        """Drop an id that has already left storage from the schedule, history and registry."""
        self.schedule.remove(entity_id)
        self.history.remove(entity_id)
        self.registry.release(entity_id)
