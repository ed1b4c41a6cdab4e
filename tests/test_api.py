from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from taskboard.api.main import create_app
from taskboard.config.settings import Settings
from taskboard.sdk.memory import InMemoryVendorSDK


@pytest.fixture
def client(sdk: InMemoryVendorSDK, settings: Settings) -> TestClient:
    return TestClient(create_app(sdk=sdk, settings_override=settings))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "taskboard"}


def test_task_lifecycle(client: TestClient) -> None:
    create_response = client.post("/tasks", json={"title": "Draft agenda"})
    assert create_response.status_code == 200
    created = create_response.json()
    assert created["priority"] == "medium"
    assert created["status"] == "active"
    assert created["createdAt"]
    task_id = created["id"]

    listed = client.get("/tasks")
    assert [task["id"] for task in listed.json()] == [task_id]

    patched = client.patch(f"/tasks/{task_id}", json={"status": "completed", "completedAt": "2026-06-01T09:00:00Z"})
    assert patched.status_code == 200
    assert patched.json()["status"] == "completed"
    assert patched.json()["completedAt"] == "2026-06-01T09:00:00Z"
    assert patched.json()["title"] == "Draft agenda"

    deleted = client.delete(f"/tasks/{task_id}")
    assert deleted.json() == {"deleted": True, "notifications": []}

    missing = client.get(f"/tasks/{task_id}")
    assert missing.status_code == 404


def test_create_task_validation(client: TestClient) -> None:
    assert client.post("/tasks", json={"title": ""}).status_code == 422
    assert client.post("/tasks", json={"title": "x", "priority": "urgent"}).status_code == 422


def test_rejected_write_returns_bad_gateway_with_notifications(
    client: TestClient, sdk: InMemoryVendorSDK
) -> None:
    sdk.store.fail_next("create_record", {"success": False, "message": "Quota exceeded"})

    response = client.post("/tasks", json={"title": "Over quota"})

    assert response.status_code == 502
    assert response.json()["detail"] == {
        "message": "Quota exceeded",
        "notifications": ["Quota exceeded"],
    }


def test_delete_of_unknown_task_is_not_an_error(client: TestClient) -> None:
    response = client.delete("/tasks/999")

    assert response.status_code == 200
    assert response.json() == {"deleted": False, "notifications": ["Record 999 not found"]}


def test_task_files_roundtrip(client: TestClient) -> None:
    task_id = client.post("/tasks", json={"title": "Expense report"}).json()["id"]

    attached = client.post(
        f"/tasks/{task_id}/files",
        json=[
            {"name": "receipt.png", "fileData": [{"url": "https://cdn.example.com/r.png"}]},
            {"fileData": []},
        ],
    )
    assert attached.status_code == 200
    body = attached.json()
    assert [item["name"] for item in body["files"]] == ["receipt.png"]
    assert body["files"][0]["taskId"] == task_id
    assert "Record 2 failed validation" in body["notifications"]

    listed = client.get(f"/tasks/{task_id}/files").json()
    assert len(listed) == 1
    file_id = listed[0]["Id"]
    assert listed[0]["fileData"] == [{"url": "https://cdn.example.com/r.png"}]

    assert client.delete(f"/files/{file_id}").json()["deleted"] is True
    assert client.get(f"/tasks/{task_id}/files").json() == []


def test_uploader_files_endpoint(client: TestClient, sdk: InMemoryVendorSDK) -> None:
    sdk.file_uploader.file_field.files["file_data_c"] = [{"id": 4, "name": "photo.jpg"}]

    response = client.get("/file-fields/file_data_c/files")

    assert response.json() == {"files": [{"id": 4, "name": "photo.jpg"}]}


def test_create_app_requires_sdk_factory() -> None:
    app = create_app(settings_override=Settings(sdk_factory=""))

    with pytest.raises(RuntimeError, match="TASKBOARD_SDK_FACTORY"):
        with TestClient(app):
            pass


def test_create_app_loads_sdk_from_factory_path() -> None:
    app = create_app(
        settings_override=Settings(sdk_factory="taskboard.sdk.memory:build_in_memory_sdk"),
    )

    with TestClient(app) as client:
        response = client.post("/tasks", json={"title": "From factory"})

    assert response.status_code == 200
    assert response.json()["title"] == "From factory"
