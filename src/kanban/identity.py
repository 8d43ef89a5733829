"""
IdentityRegistry - one id space for tasks, epics and subtasks.

Ids are minted from a single counter and every live id is mapped to the kind
that owns it, so two collections can never hold the same id.
"""
from typing import Dict, Optional

from .models import TaskType
from .recovery import KindMismatchError

class IdentityRegistry:
    """Monotonic id source plus id -> kind lookup."""

    def __init__(self):
        self.last_used_id = -1
        self._kinds: Dict[int, TaskType] = {}

    def next_id(self) -> int:
        """Mint a new id, greater than any id ever issued or reserved."""
        self.last_used_id += 1
        return self.last_used_id

    def kind_of(self, entity_id: int) -> Optional[TaskType]:
        """Kind currently owning the id, or None."""
        return self._kinds.get(entity_id)

    def register(self, entity_id: int, kind: TaskType):
        owner = self._kinds.get(entity_id)
        if owner is not None and owner != kind:
            raise KindMismatchError(f"id={entity_id} belongs to {owner.value.lower()}, not {kind.value.lower()}")
        self._kinds[entity_id] = kind
        # An explicit id must never be handed out again by next_id()
        self.last_used_id = max(self.last_used_id, entity_id)

    def release(self, entity_id: int):
        self._kinds.pop(entity_id, None)

    def __contains__(self, entity_id: int) -> bool:
        return entity_id in self._kinds

    def __len__(self) -> int:
        return len(self._kinds)
