"""Record shapes and UI/storage field mappings."""

from taskboard.records.models import (
    FileRecord,
    FileUpload,
    Task,
    TaskCreate,
    TaskPriority,
    TaskUpdate,
)
from taskboard.records.schema import (
    FILE_SCHEMA,
    TASK_SCHEMA,
    FieldSpec,
    RecordSchema,
    equals_filter,
    order_by,
)

__all__ = [
    "FILE_SCHEMA",
    "TASK_SCHEMA",
    "FieldSpec",
    "FileRecord",
    "FileUpload",
    "RecordSchema",
    "Task",
    "TaskCreate",
    "TaskPriority",
    "TaskUpdate",
    "equals_filter",
    "order_by",
]
