"""Epic aggregation: status, duration and time window derived from subtasks."""
from datetime import datetime, timedelta
from typing import Iterable, NamedTuple, Optional

from .models import Epic, Subtask, TaskStatus

class EpicSummary(NamedTuple):
    status: TaskStatus
    duration: Optional[timedelta]
    start_time: Optional[datetime]
    end_time: Optional[datetime]

def epic_status(statuses) -> TaskStatus:
    """NEW for no subtasks, the common status if all agree, IN_PROGRESS otherwise."""
    distinct = set(statuses)
    if not distinct:
        return TaskStatus.NEW
    if len(distinct) == 1:
        return distinct.pop()
    return TaskStatus.IN_PROGRESS

def summarize(subtasks: Iterable[Subtask]) -> EpicSummary:
    """Compute the derived epic fields from scratch."""
    subtasks = list(subtasks)
    durations = [s.duration for s in subtasks if s.duration is not None]
    starts = [s.start_time for s in subtasks if s.start_time is not None]
    ends = [s.end_time for s in subtasks if s.end_time is not None]
    return EpicSummary(
        status=epic_status(s.status for s in subtasks),
        duration=sum(durations, timedelta()) if durations else None,
        start_time=min(starts) if starts else None,
        end_time=max(ends) if ends else None,
    )

def refresh_epic(epic: Epic, subtasks: Iterable[Subtask]) -> EpicSummary:
    """Overwrite the derived fields of an epic from its current subtasks."""
    summary = summarize(subtasks)
    epic.status = summary.status
    epic.duration = summary.duration
    epic.start_time = summary.start_time
    epic.set_end_time(summary.end_time)
    return summary
