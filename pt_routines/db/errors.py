"""Routine store error types.

SQLAlchemy errors never leak out of the store: writes raise RoutineSaveError,
reads raise StorageError, both chained to the original exception.
"""


class StorageError(RuntimeError):
    """Base exception for routine store failures."""

    pass


class RoutineSaveError(StorageError):
    """Raised when a routine or week plan cannot be written."""

    pass


class RoutineNotFoundError(StorageError):
    """Raised when a routine id is not in the store.

    Attributes:
        routine_id: Missing routine id
    """

    def __init__(self, routine_id: str) -> None:
        self.routine_id = routine_id
        super().__init__(f"Routine not found: {routine_id}")
