"""
Error taxonomy for schedule operations.
"""


class ScheduleError(Exception):
    """Base class for all schedule errors."""

    code = "SCHEDULE_ERROR"

    def __init__(self, message: str, details: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or []


class ValidationError(ScheduleError):
    """Malformed or missing field, detected before any write."""

    code = "VALIDATION_ERROR"


class NotFoundError(ScheduleError):
    """The targeted record does not exist for this caller."""

    code = "NOT_FOUND"

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} '{record_id}' not found")
        self.kind = kind
        self.record_id = record_id


class PersistenceError(ScheduleError):
    """
    Store-layer failure.

    ``integrity`` is True when the store rejected the write on a constraint
    (unknown resource, inverted range), False for connectivity and other
    operational failures.
    """

    code = "PERSISTENCE_ERROR"

    def __init__(self, message: str, integrity: bool = False):
        super().__init__(message)
        self.integrity = integrity


class StaleResponseError(ScheduleError):
    """A range fetch finished after a newer fetch superseded it."""

    code = "STALE_RESPONSE"

    def __init__(self, generation: int, current: int):
        super().__init__(f"response for fetch #{generation} superseded by #{current}")
        self.generation = generation
        self.current = current
