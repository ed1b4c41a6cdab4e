"""Pydantic models for the UI-facing record shapes.

Beginner terms used in this file:
- Alias: the camelCase name used on the wire (for example `createdAt`).
- populate_by_name: lets Python code build models with snake_case names too.
- exclude_unset: dumps only fields the caller actually provided.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TaskPriority = Literal["low", "medium", "high"]

DEFAULT_PRIORITY: TaskPriority = "medium"
DEFAULT_STATUS = "active"


class UIModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Task(UIModel):
    """Task record with UI field names."""

    id: int
    name: str | None = None
    tags: Any = None
    title: str = ""
    description: str = ""
    # Stored values are not validated against TaskPriority so unknown values still read.
    priority: str = DEFAULT_PRIORITY
    status: str = DEFAULT_STATUS
    created_at: str | None = None
    completed_at: str | None = None


class TaskCreate(UIModel):
    """Input for TaskService.create; title is the only required field.

    Storage names (`title_c`, `priority_c`, ...) are accepted as input too.
    """

    title: str = Field(min_length=1, validation_alias=AliasChoices("title", "title_c"))
    description: str = Field(default="", validation_alias=AliasChoices("description", "description_c"))
    priority: TaskPriority = Field(
        default=DEFAULT_PRIORITY,
        validation_alias=AliasChoices("priority", "priority_c"),
    )
    status: str = Field(default=DEFAULT_STATUS, validation_alias=AliasChoices("status", "status_c"))


class TaskUpdate(UIModel):
    """Partial update. Only fields present in `model_fields_set` are written."""

    title: str | None = None
    description: str | None = None
    priority: TaskPriority | None = None
    status: str | None = None
    completed_at: str | None = None
    tags: Any = None


class FileRecord(UIModel):
    """File attached to a task; `id` keeps the server spelling `Id` on the wire."""

    id: int = Field(alias="Id")
    name: str | None = None
    file_name: str | None = None
    file_data: Any = None
    task_id: int | None = None


class FileUpload(UIModel):
    name: str | None = Field(default=None, validation_alias=AliasChoices("name", "Name"))
    file_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("fileName", "file_name", "file_name_c"),
    )
    file_data: Any = Field(
        default=None,
        validation_alias=AliasChoices("fileData", "file_data", "file_data_c"),
    )
