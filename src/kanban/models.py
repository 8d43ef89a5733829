from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, List

ONE_MINUTE = timedelta(minutes=1)

class TaskStatus(Enum):
    NEW = "NEW"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

class TaskType(Enum):
    TASK = "TASK"
    EPIC = "EPIC"
    SUBTASK = "SUBTASK"

def truncate_to_minutes(value: Optional[timedelta]) -> Optional[timedelta]:
    """Drop the sub-minute part of a duration, rounding toward zero."""
    if value is None:
        return None
    minutes = abs(value) // ONE_MINUTE
    return timedelta(minutes=minutes if value >= timedelta(0) else -minutes)

class Task(BaseModel):
    """A plain work item. Base shape shared by epics and subtasks."""

    model_config = ConfigDict(validate_assignment=True)

    id: Optional[int] = Field(default=None, description="Unique across tasks, epics and subtasks; assigned by the manager")
    title: Optional[str] = Field(default=None, description="Short human readable name")
    description: Optional[str] = Field(default=None, description="Free-form details")
    status: Optional[TaskStatus] = Field(default=TaskStatus.NEW, description="Current status of the task")
    duration: Optional[timedelta] = Field(default=None, description="Planned length, whole minutes")
    start_time: Optional[datetime] = Field(default=None, description="Planned start, minute precision")

    @field_validator('start_time')
    @classmethod
    def truncate_start_time(cls, v):
        if v is not None:
            return v.replace(second=0, microsecond=0)
        return v

    @field_validator('duration')
    @classmethod
    def truncate_duration(cls, v):
        return truncate_to_minutes(v)

    @property
    def type(self) -> TaskType:
        return TaskType.TASK

    @property
    def end_time(self) -> Optional[datetime]:
        if self.start_time is None or self.duration is None:
            return None
        return self.start_time + self.duration

    def snapshot(self) -> 'Task':
        """Deep copy that later changes to this object do not affect."""
        return self.model_copy(deep=True)

class Epic(Task):
    """
    A container of subtasks.

    status, duration, start_time and end_time are computed by the manager from
    the epic's subtasks; values set by callers are overwritten.
    """

    subtask_ids: List[int] = Field(default_factory=list, description="Ids of owned subtasks, in order of addition")

    _end_time: Optional[datetime] = PrivateAttr(default=None)

    @property
    def type(self) -> TaskType:
        return TaskType.EPIC

    @property
    def end_time(self) -> Optional[datetime]:
        return self._end_time

    def set_end_time(self, end_time: Optional[datetime]):
        self._end_time = end_time

class Subtask(Task):
    """A task owned by exactly one epic."""

    epic_id: Optional[int] = Field(default=None, description="Id of the owning epic")

    @property
    def type(self) -> TaskType:
        return TaskType.SUBTASK
