"""Domain exceptions raised by the progression engine and its services."""


class DuoTreeError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DuoTreeError):
    """A referenced record does not exist."""


class HabitNotFoundError(NotFoundError):
    def __init__(self, habit_id: int):
        super().__init__(f"Habit not found: {habit_id}")
        self.habit_id = habit_id


class DuoNotFoundError(NotFoundError):
    def __init__(self, duo_id: int):
        super().__init__(f"Duo not found: {duo_id}")
        self.duo_id = duo_id


class TreeNotFoundError(NotFoundError):
    def __init__(self, duo_id: int):
        super().__init__(f"Tree not found for duo: {duo_id}")
        self.duo_id = duo_id


class ConflictError(DuoTreeError):
    """Concurrent writes kept colliding and the retry budget ran out."""


class ValidationError(DuoTreeError):
    """Input rejected by a business rule (bad title, duplicate, etc.)."""
