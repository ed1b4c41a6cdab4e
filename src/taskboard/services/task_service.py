"""Task record client over the vendor record store.

Reads degrade to empty results so callers can render an empty state.
Writes raise TaskServiceError so callers can react (for example keep a form open).
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from taskboard.notify import LoggingNotifier, Notifier
from taskboard.records.models import Task, TaskCreate, TaskUpdate
from taskboard.records.schema import TASK_SCHEMA, RecordSchema, order_by
from taskboard.sdk.base import RecordStoreClient
from taskboard.sdk.responses import RecordResponse
from taskboard.services.errors import ServiceUnavailableError, TaskServiceError

logger = logging.getLogger(__name__)

ClientProvider = Callable[[], RecordStoreClient | None]


class TaskService:
    """Field-mapped CRUD for the task table."""

    def __init__(
        self,
        client_provider: ClientProvider,
        notifier: Notifier | None = None,
        *,
        schema: RecordSchema = TASK_SCHEMA,
        table: str | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._client_provider = client_provider
        self.notifier = notifier or LoggingNotifier()
        self.schema = schema
        self.table = table or schema.table
        self._now = now or (lambda: datetime.now(UTC))

    async def get_all(self) -> list[Task]:
        """All tasks, newest first. Never raises."""
        client = self._client_provider()
        if client is None:
            logger.error("task_service event=client_unavailable action=get_all")
            return []

        params = {
            "fields": self.schema.projection(),
            "orderBy": [order_by(self.schema.field("created_at").storage, "DESC")],
        }
        try:
            response = RecordResponse.model_validate(
                await client.fetch_records(self.table, params)
            )
            if not response.success:
                self._report_rejected("get_all", response.message, "Failed to load tasks")
                return []
            if not response.data:
                return []
            if not isinstance(response.data, list):
                raise ValueError(f"expected a list of records, got {type(response.data).__name__}")
            return [self._to_task(raw) for raw in response.data]
        except Exception as exc:  # noqa: BLE001
            logger.error("task_service event=get_all_failed error=%s", exc)
            return []

    async def get_by_id(self, task_id: int | str) -> Task | None:
        """One task, or None when it does not exist or cannot be read."""
        client = self._client_provider()
        if client is None:
            logger.error("task_service event=client_unavailable action=get_by_id")
            return None

        try:
            response = RecordResponse.model_validate(
                await client.get_record_by_id(
                    self.table,
                    int(task_id),
                    {"fields": self.schema.projection()},
                )
            )
            if not response.data:
                return None
            return self._to_task(response.data)
        except Exception as exc:  # noqa: BLE001
            logger.error("task_service event=get_by_id_failed task_id=%s error=%s", task_id, exc)
            return None

    async def create(self, data: TaskCreate | Mapping[str, Any]) -> Task:
        try:
            task = data if isinstance(data, TaskCreate) else TaskCreate.model_validate(data)
        except ValidationError as exc:
            logger.error("task_service event=create_invalid errors=%d", exc.error_count())
            raise
        client = self._require_client("create")

        record = self.schema.to_storage(task.model_dump(), apply_defaults=True)
        record["Name"] = record[self.schema.field("title").storage]
        record[self.schema.field("created_at").storage] = self._now().isoformat()

        try:
            response = RecordResponse.model_validate(
                await client.create_record(self.table, {"records": [record]})
            )
        except Exception as exc:
            self._report_exception("create", exc)
            raise
        return self._single_write_result(response, action="create")

    async def update(self, task_id: int | str, updates: TaskUpdate | Mapping[str, Any]) -> Task:
        """Write only the fields the caller supplied; None still counts as supplied."""
        try:
            patch = updates if isinstance(updates, TaskUpdate) else TaskUpdate.model_validate(updates)
        except ValidationError as exc:
            logger.error("task_service event=update_invalid task_id=%s errors=%d", task_id, exc.error_count())
            raise
        client = self._require_client("update")

        record: dict[str, Any] = {"Id": int(task_id)}
        record.update(self.schema.to_storage(patch.model_dump(exclude_unset=True)))

        try:
            response = RecordResponse.model_validate(
                await client.update_record(self.table, {"records": [record]})
            )
        except Exception as exc:
            self._report_exception("update", exc)
            raise
        return self._single_write_result(response, action="update")

    async def delete(self, task_id: int | str) -> bool:
        """True when at least one record was deleted; False when the server deleted none."""
        client = self._require_client("delete")

        try:
            response = RecordResponse.model_validate(
                await client.delete_record(self.table, {"RecordIds": [int(task_id)]})
            )
        except Exception as exc:
            self._report_exception("delete", exc)
            raise

        if not response.success:
            message = self._report_rejected("delete", response.message, "Failed to delete task")
            raise TaskServiceError(message)
        if response.results is None:
            return False

        successful, failed = response.partition()
        if failed:
            logger.error(
                "task_service event=delete_partial_failure task_id=%s failed=%d",
                task_id,
                len(failed),
            )
            for result in failed:
                for message in result.messages(include_field_errors=False):
                    self.notifier.error(message)
            return False
        return len(successful) > 0

    def _single_write_result(self, response: RecordResponse, *, action: str) -> Task:
        fallback = f"Failed to {action} task"
        if not response.success:
            raise TaskServiceError(self._report_rejected(action, response.message, fallback))

        successful, failed = response.partition()
        if failed:
            logger.error(
                "task_service event=%s_partial_failure failed=%d details=%s",
                action,
                len(failed),
                [result.model_dump() for result in failed],
            )
            for result in failed:
                for message in result.messages():
                    self.notifier.error(message)

        if successful and successful[0].data:
            return self._to_task(successful[0].data)
        raise TaskServiceError(fallback)

    def _require_client(self, action: str) -> RecordStoreClient:
        client = self._client_provider()
        if client is None:
            logger.error("task_service event=client_unavailable action=%s", action)
            raise ServiceUnavailableError()
        return client

    def _report_rejected(self, action: str, message: str | None, fallback: str) -> str:
        text = message or fallback
        logger.error("task_service event=%s_rejected message=%s", action, text)
        self.notifier.error(text)
        return text

    def _report_exception(self, action: str, exc: Exception) -> None:
        logger.error("task_service event=%s_failed error=%s", action, exc)
        self.notifier.error(str(exc) or f"Failed to {action} task")

    def _to_task(self, raw: Mapping[str, Any]) -> Task:
        return Task.model_validate(self.schema.to_ui(raw))
