"""File record client. Every operation reports failure through its return value."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

from taskboard.notify import LoggingNotifier, Notifier
from taskboard.records.models import FileRecord, FileUpload
from taskboard.records.schema import FILE_SCHEMA, RecordSchema, equals_filter
from taskboard.sdk.base import RecordStoreClient
from taskboard.sdk.responses import RecordResponse
from taskboard.sdk.slot import SdkSlot

logger = logging.getLogger(__name__)

ClientProvider = Callable[[], RecordStoreClient | None]


class FileService:
    """Field-mapped create/read/delete for files attached to tasks."""

    def __init__(
        self,
        client_provider: ClientProvider,
        notifier: Notifier | None = None,
        *,
        sdk_slot: SdkSlot | None = None,
        schema: RecordSchema = FILE_SCHEMA,
        table: str | None = None,
    ) -> None:
        self._client_provider = client_provider
        self.notifier = notifier or LoggingNotifier()
        self.sdk_slot = sdk_slot or SdkSlot()
        self.schema = schema
        self.table = table or schema.table

    async def get_by_task_id(self, task_id: int | str) -> list[FileRecord]:
        client = self._client_provider()
        if client is None:
            logger.error("file_service event=client_unavailable action=get_by_task_id")
            return []

        try:
            params = {
                "fields": self.schema.projection(),
                "where": [equals_filter(self.schema.field("task_id").storage, [int(task_id)])],
            }
            response = RecordResponse.model_validate(
                await client.fetch_records(self.table, params)
            )
            if not response.success:
                logger.error(
                    "file_service event=fetch_rejected task_id=%s message=%s",
                    task_id,
                    response.message,
                )
                return []
            return [self._to_file(raw) for raw in response.data or []]
        except Exception as exc:  # noqa: BLE001
            logger.error("file_service event=fetch_failed task_id=%s error=%s", task_id, exc)
            return []

    async def create_files(
        self,
        task_id: int | str,
        files: Sequence[FileUpload | Mapping[str, Any]] | None,
    ) -> list[FileRecord]:
        """Create one record per file; returns only the records the server accepted."""
        if not files:
            return []

        client = self._client_provider()
        if client is None:
            logger.error("file_service event=client_unavailable action=create_files")
            self.notifier.error("Service not available")
            return []

        try:
            records = [self._to_record(task_id, item) for item in files]
            response = RecordResponse.model_validate(
                await client.create_record(self.table, {"records": records})
            )
            if not response.success:
                message = response.message or "Failed to create files"
                logger.error("file_service event=create_rejected message=%s", message)
                self.notifier.error(message)
                return []

            successful, failed = response.partition()
            if failed:
                logger.error(
                    "file_service event=create_partial_failure failed=%d details=%s",
                    len(failed),
                    [result.model_dump() for result in failed],
                )
                for result in failed:
                    for message in result.messages():
                        self.notifier.error(message)
            return [self._to_file(result.data) for result in successful if result.data]
        except Exception as exc:  # noqa: BLE001
            logger.error("file_service event=create_failed task_id=%s error=%s", task_id, exc)
            self.notifier.error(str(exc) or "Failed to create files")
            return []

    async def delete_file(self, file_id: int | str) -> bool:
        """True only when exactly one record was deleted."""
        client = self._client_provider()
        if client is None:
            logger.error("file_service event=client_unavailable action=delete_file")
            return False

        try:
            response = RecordResponse.model_validate(
                await client.delete_record(self.table, {"RecordIds": [int(file_id)]})
            )
            if not response.success:
                message = response.message or "Failed to delete file"
                logger.error("file_service event=delete_rejected file_id=%s message=%s", file_id, message)
                self.notifier.error(message)
                return False
            if response.results is None:
                return False

            successful, failed = response.partition()
            if failed:
                logger.error(
                    "file_service event=delete_partial_failure file_id=%s failed=%d",
                    file_id,
                    len(failed),
                )
                for result in failed:
                    for message in result.messages(include_field_errors=False):
                        self.notifier.error(message)
            return len(successful) == 1
        except Exception as exc:  # noqa: BLE001
            logger.error("file_service event=delete_failed file_id=%s error=%s", file_id, exc)
            self.notifier.error(str(exc) or "Failed to delete file")
            return False

    @staticmethod
    def get_file_url(file_data: Any) -> str | None:
        """URL of the first uploaded file in a `file_data` payload."""
        if not file_data or not isinstance(file_data, (list, tuple)):
            return None
        first = file_data[0]
        if isinstance(first, Mapping):
            return first.get("url") or None
        return None

    def get_files_from_uploader(self, field_key: str) -> list[dict[str, Any]]:
        """Files currently held by the mounted widget for `field_key`."""
        sdk = self.sdk_slot.get()
        if sdk is None:
            logger.error("file_service event=uploader_unavailable field_key=%s", field_key)
            return []
        try:
            files = sdk.file_uploader.file_field.get_files(field_key)
        except Exception as exc:  # noqa: BLE001
            logger.error("file_service event=uploader_failed field_key=%s error=%s", field_key, exc)
            return []
        if not isinstance(files, list):
            return []
        return list(files)

    def _to_record(self, task_id: int | str, item: FileUpload | Mapping[str, Any]) -> dict[str, Any]:
        upload = item if isinstance(item, FileUpload) else FileUpload.model_validate(item)
        display_name = upload.name or upload.file_name
        record = self.schema.to_storage(
            {"name": display_name, "file_name": display_name, "file_data": upload.file_data}
        )
        record[self.schema.field("task_id").storage] = int(task_id)
        return record

    def _to_file(self, raw: Mapping[str, Any]) -> FileRecord:
        return FileRecord.model_validate(self.schema.to_ui(raw))
