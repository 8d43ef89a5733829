"""Unit tests for the chronological schedule index."""

from datetime import datetime, timedelta
from kanban.models import Task
from kanban.schedule import ScheduleIndex

T = datetime(2024, 5, 1, 9, 0)


def timed(task_id, offset, minutes):
    return Task(id=task_id, start_time=T + timedelta(minutes=offset), duration=timedelta(minutes=minutes))


class TestScheduleIndex:

    def test_items_in_chronological_order(self):
        index = ScheduleIndex()
        index.insert(timed(1, 60, 10))
        index.insert(timed(2, 0, 10))
        index.insert(timed(3, 30, 10))
        assert [task.id for task in index.items()] == [2, 3, 1]
        assert len(index) == 3

    def test_unscheduled_task_ignored(self):
        index = ScheduleIndex()
        index.insert(Task(id=1))
        assert len(index) == 0
        assert 1 not in index

    def test_overlap_detection(self):
        index = ScheduleIndex()
        index.insert(timed(1, 0, 30))
        assert index.would_overlap(timed(2, 15, 10))
        assert index.would_overlap(timed(2, -10, 20))
        assert index.would_overlap(timed(2, 0, 30))
        assert index.would_overlap(timed(2, -60, 120))

    def test_back_to_back_is_not_overlap(self):
        index = ScheduleIndex()
        index.insert(timed(1, 0, 30))
        assert not index.would_overlap(timed(2, 30, 30))
        assert not index.would_overlap(timed(2, -30, 30))

    def test_gap_between_entries(self):
        index = ScheduleIndex()
        index.insert(timed(1, 0, 30))
        index.insert(timed(2, 60, 30))
        assert not index.would_overlap(timed(3, 30, 30))
        assert index.would_overlap(timed(3, 30, 31))

    def test_excluded_entry_is_skipped(self):
        index = ScheduleIndex()
        index.insert(timed(1, 0, 30))
        index.insert(timed(2, 30, 30))
        assert not index.would_overlap(timed(1, 10, 20), excluding_id=1)
        assert index.would_overlap(timed(1, 10, 30), excluding_id=1)
        assert index.would_overlap(timed(2, 20, 30), excluding_id=2)

    def test_unscheduled_candidate_never_overlaps(self):
        index = ScheduleIndex()
        index.insert(timed(1, 0, 30))
        assert not index.would_overlap(Task(id=2))

    def test_remove_and_replace(self):
        index = ScheduleIndex()
        index.insert(timed(1, 0, 30))
        index.insert(timed(2, 60, 30))
        index.replace(timed(1, 120, 30))
        assert [task.id for task in index.items()] == [2, 1]
        index.replace(Task(id=2))
        assert [task.id for task in index.items()] == [1]
        index.remove(1)
        index.remove(99)
        assert index.items() == []
