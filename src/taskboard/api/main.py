"""FastAPI app entrypoint exposing the task and file clients over HTTP."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from functools import partial

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from taskboard.config.settings import Settings, get_settings
from taskboard.notify import CollectingNotifier
from taskboard.records.models import FileRecord, FileUpload, Task, TaskCreate, TaskUpdate
from taskboard.sdk.base import VendorSDK
from taskboard.sdk.slot import SdkSlot, build_record_client, load_sdk
from taskboard.services.errors import ServiceUnavailableError, TaskServiceError
from taskboard.services.file_service import FileService
from taskboard.services.task_service import TaskService

logger = logging.getLogger(__name__)


class DeleteResponse(BaseModel):
    deleted: bool
    notifications: list[str] = Field(default_factory=list)


class FileBatchResponse(BaseModel):
    files: list[FileRecord] = Field(default_factory=list)
    notifications: list[str] = Field(default_factory=list)


def _ensure_runtime_state(
    app: FastAPI,
    *,
    settings: Settings,
    sdk_override: VendorSDK | None,
) -> None:
    if not hasattr(app.state, "settings"):
        app.state.settings = settings
        logging.getLogger("taskboard").setLevel(settings.log_level.upper())

    if not hasattr(app.state, "sdk_slot"):
        if sdk_override is None and not settings.sdk_factory:
            raise RuntimeError(
                "Missing vendor SDK. Set TASKBOARD_SDK_FACTORY to a 'module:callable' "
                "import path before starting the app."
            )
        slot = SdkSlot()
        slot.publish(sdk_override or load_sdk(settings.sdk_factory))
        app.state.sdk_slot = slot


def create_app(
    *,
    sdk: VendorSDK | None = None,
    settings_override: Settings | None = None,
) -> FastAPI:
    settings = settings_override or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _ensure_runtime_state(app, settings=settings, sdk_override=sdk)
        yield

    app_lifespan = lifespan if sdk is None else None
    app = FastAPI(title=settings.app_name, lifespan=app_lifespan)

    # Keep test paths reliable when lifespan is not executed by the client.
    if sdk is not None:
        _ensure_runtime_state(app, settings=settings, sdk_override=sdk)

    def _slot(request: Request) -> SdkSlot:
        if not hasattr(request.app.state, "sdk_slot"):
            _ensure_runtime_state(request.app, settings=settings, sdk_override=sdk)
        return request.app.state.sdk_slot

    def _task_service(request: Request, notifier: CollectingNotifier) -> TaskService:
        return TaskService(
            partial(build_record_client, _slot(request), settings),
            notifier,
            table=settings.task_table,
        )

    def _file_service(request: Request, notifier: CollectingNotifier) -> FileService:
        slot = _slot(request)
        return FileService(
            partial(build_record_client, slot, settings),
            notifier,
            sdk_slot=slot,
            table=settings.file_table,
        )

    def _write_failed(exc: Exception, notifier: CollectingNotifier) -> HTTPException:
        status_code = 503 if isinstance(exc, ServiceUnavailableError) else 502
        return HTTPException(
            status_code=status_code,
            detail={"message": str(exc), "notifications": notifier.messages},
        )

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "service": settings.app_name}

    @app.get("/tasks", response_model=list[Task])
    async def list_tasks(request: Request) -> list[Task]:
        return await _task_service(request, CollectingNotifier()).get_all()

    @app.get("/tasks/{task_id}", response_model=Task)
    async def get_task(task_id: int, request: Request) -> Task:
        task = await _task_service(request, CollectingNotifier()).get_by_id(task_id)
        if task is None:
            raise HTTPException(status_code=404, detail="Task not found")
        return task

    @app.post("/tasks", response_model=Task)
    async def create_task(payload: TaskCreate, request: Request) -> Task:
        notifier = CollectingNotifier()
        try:
            return await _task_service(request, notifier).create(payload)
        except Exception as exc:
            raise _write_failed(exc, notifier) from exc

    @app.patch("/tasks/{task_id}", response_model=Task)
    async def update_task(task_id: int, payload: TaskUpdate, request: Request) -> Task:
        notifier = CollectingNotifier()
        try:
            return await _task_service(request, notifier).update(task_id, payload)
        except Exception as exc:
            raise _write_failed(exc, notifier) from exc

    @app.delete("/tasks/{task_id}", response_model=DeleteResponse)
    async def delete_task(task_id: int, request: Request) -> DeleteResponse:
        notifier = CollectingNotifier()
        try:
            deleted = await _task_service(request, notifier).delete(task_id)
        except Exception as exc:
            raise _write_failed(exc, notifier) from exc
        logger.info("api event=task_deleted task_id=%s deleted=%s", task_id, deleted)
        return DeleteResponse(deleted=deleted, notifications=notifier.messages)

    @app.get("/tasks/{task_id}/files", response_model=list[FileRecord])
    async def list_task_files(task_id: int, request: Request) -> list[FileRecord]:
        return await _file_service(request, CollectingNotifier()).get_by_task_id(task_id)

    @app.post("/tasks/{task_id}/files", response_model=FileBatchResponse)
    async def attach_files(
        task_id: int,
        payload: list[FileUpload],
        request: Request,
    ) -> FileBatchResponse:
        notifier = CollectingNotifier()
        files = await _file_service(request, notifier).create_files(task_id, payload)
        return FileBatchResponse(files=files, notifications=notifier.messages)

    @app.delete("/files/{file_id}", response_model=DeleteResponse)
    async def delete_file(file_id: int, request: Request) -> DeleteResponse:
        notifier = CollectingNotifier()
        deleted = await _file_service(request, notifier).delete_file(file_id)
        return DeleteResponse(deleted=deleted, notifications=notifier.messages)

    @app.get("/file-fields/{field_key}/files")
    def uploader_files(field_key: str, request: Request) -> dict[str, list[dict]]:
        service = _file_service(request, CollectingNotifier())
        return {"files": service.get_files_from_uploader(field_key)}

    return app


app = create_app()
