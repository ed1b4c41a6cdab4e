"""Pydantic views over record-store responses.

The vendor client answers every call with the same envelope:
- success/message: request-level outcome.
- data: a record (by id) or a list of records (fetch).
- results: one entry per record for create/update/delete batches.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FieldError(BaseModel):
    """Validation failure reported for one field of one record."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    field_label: str = Field(default="", alias="fieldLabel")
    message: str = ""

    def __str__(self) -> str:
        if self.field_label:
            return f"{self.field_label}: {self.message}"
        return self.message


class RecordResult(BaseModel):
    """Outcome for one record inside a batch write."""

    model_config = ConfigDict(extra="allow")

    success: bool = False
    data: dict[str, Any] | None = None
    errors: list[FieldError] = Field(default_factory=list)
    message: str | None = None

    @field_validator("errors", mode="before")
    @classmethod
    def _coerce_errors(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [{"message": item} if isinstance(item, str) else item for item in value]
        return value

    def messages(self, *, include_field_errors: bool = True) -> list[str]:
        """User-facing strings: each field error, then the record message."""
        collected = [str(error) for error in self.errors] if include_field_errors else []
        if self.message:
            collected.append(self.message)
        return collected


class RecordResponse(BaseModel):
    """Envelope returned by every record-store call."""

    model_config = ConfigDict(extra="allow")

    success: bool = False
    message: str | None = None
    data: Any = None
    results: list[RecordResult] | None = None

    def partition(self) -> tuple[list[RecordResult], list[RecordResult]]:
        """Split batch results into (successful, failed)."""
        results = self.results or []
        successful = [result for result in results if result.success]
        failed = [result for result in results if not result.success]
        return successful, failed
