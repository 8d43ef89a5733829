class KanbanError(Exception):
    """Base exception for all task manager errors."""
    pass

class RecoverableError(KanbanError):
    """The request was rejected; engine state is unchanged."""
    pass

class FatalError(KanbanError):
    """An error that requires application termination or major intervention."""
    pass

class ManagerValidationError(RecoverableError):
    """Null entity, null id, missing status or a malformed duration/start time pair."""
    pass

class TaskOverlapError(ManagerValidationError):
    """Time slot is already taken by another scheduled task or subtask."""
    pass

class TaskNotFoundError(RecoverableError):
    """No entity of the requested kind with the given id."""
    pass

class EpicReferenceError(TaskNotFoundError):
    """Subtask refers to an epic that does not exist."""
    pass

class KindMismatchError(RecoverableError):
    """Id is owned by an entity of another kind."""
    pass

class FileOperationError(RecoverableError):
    """File operation failed but can be retried."""
    pass

class CorruptionError(FatalError):
    """Corrupted Data Error - from syntax errors in data formats, to just unknown data"""
    pass

class CSVParsingError(CorruptionError):
    """A record line cannot be split into fields."""

    def __init__(self, message: str, position: int = None):
        if position is None:
            super().__init__(message)
        else:
            super().__init__(f"{message} at {position}")
        self.position = position

class ManagerLoadError(CorruptionError):
    """Task file cannot be loaded; nothing from it was applied."""
    pass

class ManagerSaveError(FatalError):
    """Engine state cannot be written to the task file."""
    pass
