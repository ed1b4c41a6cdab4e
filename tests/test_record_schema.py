from __future__ import annotations

import pytest

from taskboard.records.schema import FILE_SCHEMA, TASK_SCHEMA, equals_filter, order_by


def test_task_schema_reads_storage_names_with_defaults() -> None:
    values = TASK_SCHEMA.to_ui({"Id": 4, "title_c": "Ship release", "created_at_c": "2026-01-02T00:00:00+00:00"})

    assert values["id"] == 4
    assert values["title"] == "Ship release"
    assert values["description"] == ""
    assert values["priority"] == "medium"
    assert values["status"] == "active"
    assert values["created_at"] == "2026-01-02T00:00:00+00:00"
    assert values["completed_at"] is None


def test_task_schema_falls_back_to_name_and_created_on() -> None:
    values = TASK_SCHEMA.to_ui({"Id": 1, "Name": "Legacy task", "CreatedOn": "2025-12-31T08:00:00Z"})

    assert values["title"] == "Legacy task"
    assert values["created_at"] == "2025-12-31T08:00:00Z"


def test_to_storage_includes_only_present_keys() -> None:
    assert TASK_SCHEMA.to_storage({"status": "completed"}) == {"status_c": "completed"}
    assert TASK_SCHEMA.to_storage({"completed_at": None}) == {"completed_at_c": None}


def test_to_storage_applies_defaults_for_missing_or_empty_fields() -> None:
    payload = TASK_SCHEMA.to_storage({"title": "Write docs", "priority": ""}, apply_defaults=True)

    assert payload == {
        "title_c": "Write docs",
        "description_c": "",
        "priority_c": "medium",
        "status_c": "active",
    }


def test_read_and_write_mappings_are_symmetric() -> None:
    ui_values = {
        "title": "Plan sprint",
        "description": "Pick stories",
        "priority": "high",
        "status": "completed",
        "completed_at": "2026-03-01T10:00:00Z",
    }
    stored = {"Id": 9, **TASK_SCHEMA.to_storage(ui_values)}

    read_back = TASK_SCHEMA.to_ui(stored)

    for key, value in ui_values.items():
        assert read_back[key] == value


def test_id_is_never_written() -> None:
    assert "Id" not in TASK_SCHEMA.to_storage({"id": 5, "title": "x"})


def test_file_schema_unwraps_lookup_task_reference() -> None:
    values = FILE_SCHEMA.to_ui(
        {"Id": 11, "file_name_c": "spec.pdf", "task_c": {"Id": 3, "Name": "Parent"}}
    )

    assert values["id"] == 11
    assert values["name"] == "spec.pdf"
    assert values["task_id"] == 3


def test_projection_lists_every_storage_field() -> None:
    names = [entry["field"]["Name"] for entry in FILE_SCHEMA.projection()]

    assert names == ["Id", "Name", "file_name_c", "file_data_c", "task_c"]


def test_query_helpers_build_vendor_shapes() -> None:
    assert equals_filter("task_c", [7]) == {
        "FieldName": "task_c",
        "Operator": "EqualTo",
        "Values": [7],
        "Include": True,
    }
    assert order_by("created_at_c", "desc") == {"fieldName": "created_at_c", "sorttype": "DESC"}


def test_unknown_field_lookup_raises() -> None:
    with pytest.raises(KeyError):
        TASK_SCHEMA.field("owner")
