"""Errors raised by the record clients."""


class TaskServiceError(RuntimeError):
    """A task write was rejected by the record store or returned no record."""


class ServiceUnavailableError(TaskServiceError):
    """No record-store client could be built (vendor SDK not loaded)."""

    def __init__(self, message: str = "Service not available") -> None:
        super().__init__(message)
