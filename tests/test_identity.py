"""Unit tests for the shared id registry."""

import pytest
from kanban.identity import IdentityRegistry
from kanban.models import TaskType
from kanban.recovery import KindMismatchError


class TestIdentityRegistry:

    def test_ids_start_at_zero_and_increase(self):
        registry = IdentityRegistry()
        assert [registry.next_id() for _ in range(3)] == [0, 1, 2]

    def test_kind_of(self):
        registry = IdentityRegistry()
        registry.register(registry.next_id(), TaskType.EPIC)
        assert registry.kind_of(0) == TaskType.EPIC
        assert registry.kind_of(1) is None
        assert 0 in registry
        assert len(registry) == 1

    def test_explicit_id_advances_counter(self):
        registry = IdentityRegistry()
        registry.register(41, TaskType.TASK)
        assert registry.next_id() == 42

    def test_lower_explicit_id_keeps_counter(self):
        registry = IdentityRegistry()
        registry.register(10, TaskType.TASK)
        registry.register(3, TaskType.TASK)
        assert registry.next_id() == 11

    def test_release_does_not_reuse_ids(self):
        registry = IdentityRegistry()
        task_id = registry.next_id()
        registry.register(task_id, TaskType.TASK)
        registry.release(task_id)
        assert registry.kind_of(task_id) is None
        assert registry.next_id() == task_id + 1

    def test_register_with_other_kind_fails(self):
        registry = IdentityRegistry()
        registry.register(5, TaskType.SUBTASK)
        with pytest.raises(KindMismatchError, match="id=5 belongs to subtask"):
            registry.register(5, TaskType.TASK)
