"""Planner error taxonomy."""


class PlannerError(Exception):
    """Base class for planner errors."""

    pass


class ValidationError(PlannerError):
    """Raised when caller input fails a precondition."""

    pass


class MissingFieldError(ValidationError):
    """Raised when a required field is absent from a request."""

    def __init__(self, field: str):
        super().__init__(f"{field} required")
        self.field = field


class NotFoundError(PlannerError):
    """Raised when a referenced task does not exist for a date."""

    pass


class StorageError(PlannerError):
    """Raised when durable state cannot be read or written."""

    pass
