"""
Record codec for the task file.

One header line followed by one record per entity:
``id,type,name,status,description,duration,start,epic``.
Epic records leave status, duration and start empty since those are derived;
only subtask records carry an epic id.
"""
import re
from datetime import datetime, timedelta
from typing import List, Optional

from kanban.models import Task, Epic, Subtask, TaskStatus, TaskType
from kanban.recovery import CSVParsingError, ManagerSaveError
from .csv_line import Token, split_line

FILE_HEADER = "id,type,name,status,description,duration,start,epic"
FIELD_COUNT = len(FILE_HEADER.split(','))
NULL = "null"

INTEGER_PATTERN = re.compile(r'^-?\d+$')
DATETIME_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}')

# --- Encoding ---

def _encode_text(text: Optional[str], task_id: int) -> str:
    if text is None:
        return NULL
    if '\n' in text or '\r' in text:
        raise ManagerSaveError(f"text with line break cannot be saved for id={task_id}")
    return '"' + text.replace('"', '""') + '"'

def _encode_status(status: Optional[TaskStatus]) -> str:
    return NULL if status is None else status.value

def _encode_duration(duration: Optional[timedelta]) -> str:
    return NULL if duration is None else str(int(duration.total_seconds()) // 60)

def _encode_datetime(value: Optional[datetime]) -> str:
    return NULL if value is None else value.isoformat(timespec='minutes')

def encode_record(task: Task) -> str:
    """Render one entity as a record line (no line terminator)."""
    is_epic = task.type == TaskType.EPIC
    fields = [
        str(task.id),
        task.type.value,
        _encode_text(task.title, task.id),
        '' if is_epic else _encode_status(task.status),
        _encode_text(task.description, task.id),
        '' if is_epic else _encode_duration(task.duration),
        '' if is_epic else _encode_datetime(task.start_time),
        str(task.epic_id) if task.type == TaskType.SUBTASK else '',
    ]
    return ','.join(fields)

def encode_state(manager) -> List[str]:
    """
    Header plus every live entity: tasks, then epics, then subtasks grouped
    by epic in each epic's own order.
    """
    lines = [FILE_HEADER]
    lines.extend(encode_record(task) for task in manager.tasks.values())
    lines.extend(encode_record(epic) for epic in manager.epics.values())
    for epic in manager.epics.values():
        lines.extend(encode_record(manager.subtasks[subtask_id]) for subtask_id in epic.subtask_ids)
    return lines

# --- Decoding ---

def record_id_of(line: str) -> Optional[int]:
    """Id at the start of a record line, or None if there is no numeric id."""
    head = line.split(',', 1)[0]
    if INTEGER_PATTERN.match(head):
        return int(head)
    return None

def _decode_int(token: Token, message: str) -> int:
    if token.quoted or not INTEGER_PATTERN.match(token.text):
        raise CSVParsingError(message, token.position)
    return int(token.text)

def _decode_type(token: Token) -> TaskType:
    try:
        if token.quoted:
            raise ValueError(token.text)
        return TaskType(token.text)
    except ValueError:
        raise CSVParsingError("unknown task type", token.position)

def _decode_text(token: Token) -> Optional[str]:
    if not token.quoted:
        if token.text == NULL:
            return None
        raise CSVParsingError("text value must be inside double quotes", token.position)
    return token.text

def _decode_status(token: Token) -> Optional[TaskStatus]:
    if not token.quoted and token.text == NULL:
        return None
    try:
        if token.quoted:
            raise ValueError(token.text)
        return TaskStatus(token.text)
    except ValueError:
        raise CSVParsingError("unknown task status", token.position)

def _decode_duration(token: Token) -> Optional[timedelta]:
    if not token.quoted and token.text == NULL:
        return None
    return timedelta(minutes=_decode_int(token, "wrong duration format"))

def _decode_datetime(token: Token) -> Optional[datetime]:
    if not token.quoted and token.text == NULL:
        return None
    try:
        if token.quoted or not DATETIME_PATTERN.match(token.text):
            raise ValueError(token.text)
        value = datetime.fromisoformat(token.text)
    except ValueError:
        raise CSVParsingError("wrong start time format", token.position)
    if value.tzinfo is not None:
        raise CSVParsingError("start time must be a local date-time", token.position)
    return value

def _require_empty(token: Token, message: str):
    if token.quoted or token.text:
        raise CSVParsingError(message, token.position)

def decode_record(line: str) -> Task:
    """Parse a record line into a Task, Epic or Subtask; raises CSVParsingError."""
    tokens = split_line(line)
    task_id = _decode_int(tokens[0], "line does not start with numeric id")
    if len(tokens) < FIELD_COUNT:
        raise CSVParsingError("unexpected end of line", len(line) + 1)
    if len(tokens) > FIELD_COUNT:
        raise CSVParsingError("unexpected data", tokens[FIELD_COUNT].position)

    _, type_token, name, status, description, duration, start, epic = tokens
    task_type = _decode_type(type_token)

    if task_type == TaskType.EPIC:
        _require_empty(status, "explicit epic status")
        _require_empty(duration, "explicit epic duration")
        _require_empty(start, "explicit epic start time")
        _require_empty(epic, "unexpected data")
        return Epic(id=task_id, title=_decode_text(name), description=_decode_text(description))

    fields = dict(
        id=task_id,
        title=_decode_text(name),
        status=_decode_status(status),
        description=_decode_text(description),
        duration=_decode_duration(duration),
        start_time=_decode_datetime(start),
    )
    if task_type == TaskType.SUBTASK:
        return Subtask(epic_id=_decode_int(epic, "wrong epic id format"), **fields)
    _require_empty(epic, "unexpected data")
    return Task(**fields)
