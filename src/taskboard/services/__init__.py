"""Record clients for tasks and their files."""

from taskboard.services.errors import ServiceUnavailableError, TaskServiceError
from taskboard.services.file_service import FileService
from taskboard.services.task_service import TaskService

__all__ = [
    "FileService",
    "ServiceUnavailableError",
    "TaskService",
    "TaskServiceError",
]
