"""In-memory vendor SDK for tests and local runs."""

from __future__ import annotations

import copy
from datetime import UTC, datetime
from typing import Any


class InMemoryRecordStore:
    """Table-backed stand-in for the vendor record-store client."""

    def __init__(self, *, required_fields: dict[str, tuple[str, ...]] | None = None) -> None:
        self.required_fields = required_fields or {}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self._tables: dict[str, dict[int, dict[str, Any]]] = {}
        self._next_id = 1
        self._failures: dict[str, Any] = {}

    def seed(self, table: str, records: list[dict[str, Any]]) -> list[int]:
        """Insert rows directly, bypassing validation, and return their ids."""
        return [self._insert(table, record)["Id"] for record in records]

    def rows(self, table: str) -> list[dict[str, Any]]:
        return [copy.deepcopy(row) for row in self._tables.get(table, {}).values()]

    def fail_next(self, method: str, outcome: dict[str, Any] | Exception) -> None:
        """Make the next call to `method` return `outcome`, or raise it if it is an exception."""
        self._failures[method] = outcome

    async def fetch_records(self, table: str, params: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("fetch_records", table, params))
        if (injected := self._injected("fetch_records")) is not None:
            return injected
        rows = list(self._tables.get(table, {}).values())
        try:
            for clause in params.get("where", []):
                rows = [row for row in rows if _matches(row, clause)]
        except ValueError as exc:
            return {"success": False, "message": str(exc)}
        for order in reversed(params.get("orderBy", [])):
            field = order.get("fieldName", "Id")
            descending = str(order.get("sorttype", "ASC")).upper() == "DESC"
            rows.sort(key=lambda row: _sort_key(row.get(field)), reverse=descending)
        return {"success": True, "data": [_project(row, params) for row in rows]}

    async def get_record_by_id(
        self,
        table: str,
        record_id: int,
        params: dict[str, Any],
    ) -> dict[str, Any]:
        self.calls.append(("get_record_by_id", table, {"id": record_id, **params}))
        if (injected := self._injected("get_record_by_id")) is not None:
            return injected
        row = self._tables.get(table, {}).get(int(record_id))
        return {"success": True, "data": _project(row, params) if row else None}

    async def create_record(self, table: str, params: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("create_record", table, params))
        if (injected := self._injected("create_record")) is not None:
            return injected
        results: list[dict[str, Any]] = []
        for index, record in enumerate(params.get("records", []), start=1):
            missing = [name for name in self.required_fields.get(table, ()) if not record.get(name)]
            if missing:
                results.append(
                    {
                        "success": False,
                        "errors": [
                            {"fieldLabel": name, "message": "This field is required"}
                            for name in missing
                        ],
                        "message": f"Record {index} failed validation",
                    }
                )
                continue
            created = self._insert(table, record)
            results.append({"success": True, "data": copy.deepcopy(created)})
        return {"success": True, "results": results}

    async def update_record(self, table: str, params: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("update_record", table, params))
        if (injected := self._injected("update_record")) is not None:
            return injected
        rows = self._tables.get(table, {})
        results: list[dict[str, Any]] = []
        for record in params.get("records", []):
            record_id = record.get("Id")
            current = rows.get(record_id) if isinstance(record_id, int) else None
            if current is None:
                results.append({"success": False, "message": f"Record {record_id} not found"})
                continue
            current.update({key: value for key, value in record.items() if key != "Id"})
            current["ModifiedOn"] = _now_iso()
            results.append({"success": True, "data": copy.deepcopy(current)})
        return {"success": True, "results": results}

    async def delete_record(self, table: str, params: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("delete_record", table, params))
        if (injected := self._injected("delete_record")) is not None:
            return injected
        rows = self._tables.get(table, {})
        results: list[dict[str, Any]] = []
        for record_id in params.get("RecordIds", []):
            if rows.pop(record_id, None) is None:
                results.append({"success": False, "message": f"Record {record_id} not found"})
            else:
                results.append({"success": True, "data": {"Id": record_id}})
        return {"success": True, "results": results}

    def _insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        row = copy.deepcopy(record)
        row["Id"] = self._next_id
        row.setdefault("CreatedOn", _now_iso())
        self._next_id += 1
        self._tables.setdefault(table, {})[row["Id"]] = row
        return row

    def _injected(self, method: str) -> dict[str, Any] | None:
        outcome = self._failures.pop(method, None)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class InMemoryFileField:
    """Records widget calls and keeps the file list per field key."""

    def __init__(self) -> None:
        self.mounted: dict[str, dict[str, Any]] = {}
        self.files: dict[str, list[dict[str, Any]]] = {}
        self.calls: list[tuple[str, str]] = []

    async def mount(self, element_id: str, config: dict[str, Any]) -> None:
        self.calls.append(("mount", element_id))
        self.mounted[element_id] = copy.deepcopy(config)
        field_key = config.get("fieldKey")
        if field_key:
            self.files[field_key] = copy.deepcopy(list(config.get("existingFiles") or []))

    def unmount(self, element_id: str) -> None:
        self.calls.append(("unmount", element_id))
        self.mounted.pop(element_id, None)

    async def update_files(self, field_key: str, files: list[dict[str, Any]]) -> None:
        self.calls.append(("update_files", field_key))
        self.files[field_key] = copy.deepcopy(files)

    async def clear_field(self, field_key: str) -> None:
        self.calls.append(("clear_field", field_key))
        self.files[field_key] = []

    def get_files(self, field_key: str) -> list[dict[str, Any]] | None:
        files = self.files.get(field_key)
        return copy.deepcopy(files) if files is not None else None


class InMemoryFileUploader:
    def __init__(self) -> None:
        self.file_field = InMemoryFileField()

    def to_ui_format(self, files: list[dict[str, Any]]) -> list[dict[str, Any]]:
        converted = []
        for item in files:
            entry = {key: value for key, value in item.items() if key != "Id"}
            entry["id"] = item.get("Id")
            converted.append(entry)
        return converted


class InMemoryVendorSDK:
    """Vendor SDK double exposing one shared record store and file uploader."""

    def __init__(
        self,
        *,
        store: InMemoryRecordStore | None = None,
        required_fields: dict[str, tuple[str, ...]] | None = None,
    ) -> None:
        self.store = store or InMemoryRecordStore(required_fields=required_fields)
        self.file_uploader = InMemoryFileUploader()
        self.client_options: list[dict[str, str]] = []

    def create_client(self, *, apper_project_id: str, apper_public_key: str) -> InMemoryRecordStore:
        self.client_options.append(
            {"apper_project_id": apper_project_id, "apper_public_key": apper_public_key}
        )
        return self.store


def build_in_memory_sdk() -> InMemoryVendorSDK:
    """Factory usable as TASKBOARD_SDK_FACTORY for local runs."""
    return InMemoryVendorSDK(
        required_fields={"task_c": ("title_c",), "files_c": ("file_name_c",)},
    )


def _matches(row: dict[str, Any], clause: dict[str, Any]) -> bool:
    operator = clause.get("Operator", "EqualTo")
    if operator != "EqualTo":
        raise ValueError(f"Unsupported operator: {operator}")
    value = row.get(clause.get("FieldName", ""))
    if isinstance(value, dict):
        value = value.get("Id")
    hit = value in clause.get("Values", [])
    return hit if clause.get("Include", True) else not hit


def _project(row: dict[str, Any], params: dict[str, Any]) -> dict[str, Any]:
    fields = params.get("fields")
    if not fields:
        return copy.deepcopy(row)
    names = {"Id"} | {entry.get("field", {}).get("Name") for entry in fields}
    return {key: copy.deepcopy(value) for key, value in row.items() if key in names}


def _sort_key(value: Any) -> tuple[bool, str]:
    return (value is None, "" if value is None else str(value))


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()
