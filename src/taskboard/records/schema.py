"""Declarative mapping between UI field names and remote table field names.

Each record type is described once by a `RecordSchema`. The same table drives
reads (storage -> UI, with fallbacks and defaults) and writes (UI -> storage,
only for keys the caller actually supplied), so both directions stay in step.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping


@dataclass(frozen=True)
class FieldSpec:
    ui: str
    storage: str
    default: Any = None
    # Other storage fields consulted, in order, when `storage` is empty.
    fallbacks: tuple[str, ...] = ()
    reader: Callable[[Any], Any] | None = None
    writable: bool = True


@dataclass(frozen=True)
class RecordSchema:
    table: str
    fields: tuple[FieldSpec, ...]

    def projection(self) -> list[dict[str, dict[str, str]]]:
        """Vendor `fields` parameter selecting every mapped storage field and its fallbacks."""
        names: list[str] = []
        for spec in self.fields:
            for name in (spec.storage, *spec.fallbacks):
                if name not in names:
                    names.append(name)
        return [{"field": {"Name": name}} for name in names]

    def to_ui(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for spec in self.fields:
            value = _first_truthy(raw, (spec.storage, *spec.fallbacks))
            if value is None:
                value = spec.default
            elif spec.reader is not None:
                value = spec.reader(value)
            values[spec.ui] = value
        return values

    def to_storage(
        self,
        values: Mapping[str, Any],
        *,
        apply_defaults: bool = False,
    ) -> dict[str, Any]:
        """Map supplied UI keys to storage keys.

        Presence decides inclusion, not value: a key set to None is still sent.
        With `apply_defaults`, writable fields that are missing or empty fall
        back to their default when one exists.
        """
        payload: dict[str, Any] = {}
        for spec in self.fields:
            if not spec.writable:
                continue
            if spec.ui in values:
                value = values[spec.ui]
                if apply_defaults and not value and spec.default is not None:
                    value = spec.default
                payload[spec.storage] = value
            elif apply_defaults and spec.default is not None:
                payload[spec.storage] = spec.default
        return payload

    def field(self, ui_name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.ui == ui_name:
                return spec
        raise KeyError(f"{self.table} has no field {ui_name!r}")


def equals_filter(field: str, values: Iterable[Any], *, include: bool = True) -> dict[str, Any]:
    return {
        "FieldName": field,
        "Operator": "EqualTo",
        "Values": list(values),
        "Include": include,
    }


def order_by(field: str, direction: str = "DESC") -> dict[str, str]:
    return {"fieldName": field, "sorttype": direction.upper()}


def lookup_id(value: Any) -> Any:
    """Lookup fields come back either as a bare id or as {"Id": ..., "Name": ...}."""
    if isinstance(value, Mapping):
        return value.get("Id")
    return value


def _first_truthy(raw: Mapping[str, Any], names: Iterable[str]) -> Any:
    for name in names:
        value = raw.get(name)
        if value:
            return value
    return None


TASK_SCHEMA = RecordSchema(
    table="task_c",
    fields=(
        FieldSpec("id", "Id", writable=False),
        FieldSpec("name", "Name"),
        FieldSpec("tags", "Tags"),
        FieldSpec("title", "title_c", default="", fallbacks=("Name",)),
        FieldSpec("description", "description_c", default=""),
        FieldSpec("priority", "priority_c", default="medium"),
        FieldSpec("status", "status_c", default="active"),
        FieldSpec("created_at", "created_at_c", fallbacks=("CreatedOn",)),
        FieldSpec("completed_at", "completed_at_c"),
    ),
)

FILE_SCHEMA = RecordSchema(
    table="files_c",
    fields=(
        FieldSpec("id", "Id", writable=False),
        FieldSpec("name", "Name", fallbacks=("file_name_c",)),
        FieldSpec("file_name", "file_name_c"),
        FieldSpec("file_data", "file_data_c"),
        FieldSpec("task_id", "task_c", reader=lookup_id),
    ),
)
