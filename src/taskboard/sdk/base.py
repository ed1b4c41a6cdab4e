"""Narrow interfaces over the vendor SDK used by this package."""

from __future__ import annotations

from typing import Any, Protocol


class RecordStoreClient(Protocol):
    async def fetch_records(self, table: str, params: dict[str, Any]) -> dict[str, Any]: ...

    async def get_record_by_id(
        self,
        table: str,
        record_id: int,
        params: dict[str, Any],
    ) -> dict[str, Any]: ...

    async def create_record(self, table: str, params: dict[str, Any]) -> dict[str, Any]: ...

    async def update_record(self, table: str, params: dict[str, Any]) -> dict[str, Any]: ...

    async def delete_record(self, table: str, params: dict[str, Any]) -> dict[str, Any]: ...


class FileFieldApi(Protocol):
    async def mount(self, element_id: str, config: dict[str, Any]) -> None: ...

    def unmount(self, element_id: str) -> None: ...

    async def update_files(self, field_key: str, files: list[dict[str, Any]]) -> None: ...

    async def clear_field(self, field_key: str) -> None: ...

    def get_files(self, field_key: str) -> list[dict[str, Any]] | None: ...


class FileUploaderApi(Protocol):
    file_field: FileFieldApi

    def to_ui_format(self, files: list[dict[str, Any]]) -> list[dict[str, Any]]: ...


class VendorSDK(Protocol):
    """Vendor runtime: the file uploader widget plus a record-store client factory."""

    file_uploader: FileUploaderApi

    def create_client(
        self,
        *,
        apper_project_id: str,
        apper_public_key: str,
    ) -> RecordStoreClient: ...
