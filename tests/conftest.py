import pytest
from datetime import datetime, timedelta

from kanban.manager import TaskManager
from kanban.models import Task, Epic, Subtask, TaskStatus

T = datetime(2024, 5, 1, 9, 0)


def minutes(n):
    return timedelta(minutes=n)


@pytest.fixture
def manager():
    return TaskManager()


@pytest.fixture
def make_task():
    def _make(title="Task", status=TaskStatus.NEW, start=None, duration=None, **kwargs):
        return Task(title=title, description=f"{title} description", status=status,
                    start_time=start, duration=duration, **kwargs)
    return _make


@pytest.fixture
def make_subtask():
    def _make(epic_id, title="Subtask", status=TaskStatus.NEW, start=None, duration=None, **kwargs):
        return Subtask(epic_id=epic_id, title=title, description=f"{title} description", status=status,
                       start_time=start, duration=duration, **kwargs)
    return _make


@pytest.fixture
def epic_id(manager):
    return manager.create_epic(Epic(title="Epic", description="Epic description"))
