"""Lifecycle controller for the vendor file-upload widget.

The controller owns one widget instance mounted into a target element:
- start(): wait for the SDK (bounded), then mount with the current file list.
- set_existing_files(): push file-list changes into the mounted widget.
- reconfigure(): remount when identity keys change, otherwise update in place.
- close(): best-effort unmount; failures are logged and never raised.

State flow: loading -> ready <-> updating, with error reachable from loading
or from an update. Only reload() leaves error.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from taskboard.sdk.base import VendorSDK
from taskboard.sdk.slot import AsyncioClock, Clock, SdkSlot
from taskboard.widgets.ui import render_file_field

logger = logging.getLogger(__name__)

SDK_MISSING_MESSAGE = (
    "ApperSDK not loaded. Please ensure the SDK script is included before this component."
)
DEFAULT_READY_TIMEOUT_S = 5.0

# Changing any of these replaces the widget instead of updating it.
REMOUNT_KEYS = ("field_key", "table_name", "apper_project_id", "apper_public_key")


class FieldState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    UPDATING = "updating"
    ERROR = "error"
    CLOSED = "closed"


class FileFieldConfig(BaseModel):
    """Widget options. Unknown caller options are kept and forwarded to mount."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    field_key: str = ""
    field_name: str | None = None
    table_name: str | None = None
    apper_project_id: str | None = None
    apper_public_key: str | None = None
    existing_files: Any = Field(default_factory=list)

    def mount_options(self, existing_files: list[dict[str, Any]]) -> dict[str, Any]:
        options = self.model_dump(by_alias=True, exclude_none=True)
        options["existingFiles"] = existing_files
        return options


def memoize_files(previous: list[dict[str, Any]], incoming: Any) -> list[dict[str, Any]]:
    """Return `previous` when `incoming` looks unchanged, else `incoming`.

    Only the length and the first entry's identifier are compared, so an
    edited list of the same size with the same first file is treated as
    unchanged.
    """
    if not isinstance(incoming, list) or not incoming:
        return []
    if len(previous) != len(incoming):
        return incoming
    if previous and _file_id(previous[0]) != _file_id(incoming[0]):
        return incoming
    return previous


def _file_id(entry: Any) -> Any:
    if not isinstance(entry, Mapping):
        return None
    return entry.get("id") or entry.get("Id")


def _needs_ui_format(entry: Any) -> bool:
    return isinstance(entry, Mapping) and "Id" in entry and "id" not in entry


class FileFieldController:
    """Keeps one mounted widget in sync with an externally supplied file list."""

    def __init__(
        self,
        element_id: str,
        config: FileFieldConfig | Mapping[str, Any],
        *,
        sdk_slot: SdkSlot,
        clock: Clock | None = None,
        timeout_s: float = DEFAULT_READY_TIMEOUT_S,
    ) -> None:
        self.element_id = element_id
        self.config = (
            config if isinstance(config, FileFieldConfig) else FileFieldConfig.model_validate(config)
        )
        self.sdk_slot = sdk_slot
        self.clock = clock or AsyncioClock()
        self.timeout_s = timeout_s
        self.state = FieldState.LOADING
        self.error: str | None = None
        self._generation = 0
        self._closed: asyncio.Event | None = None
        # Element holding the live widget, and the (generation, element) mount in flight.
        self._mounted_element: str | None = None
        self._mounting: tuple[int, str] | None = None
        # Last list the widget is known to hold, and the memoized incoming list.
        self._last_files: list[dict[str, Any]] = []
        self._memoized = memoize_files([], self.config.existing_files)

    @property
    def is_ready(self) -> bool:
        return self.state in (FieldState.READY, FieldState.UPDATING)

    async def start(self) -> FieldState:
        self._generation += 1
        generation = self._generation
        element_id = self.element_id
        self._closed = asyncio.Event()
        self.state = FieldState.LOADING
        self.error = None

        sdk = await self._wait_for_sdk(self._closed)
        if not self._is_current(generation):
            return self.state
        if sdk is None:
            logger.error(
                "file_field event=sdk_timeout element_id=%s timeout_s=%s",
                element_id,
                self.timeout_s,
            )
            return self._fail(SDK_MISSING_MESSAGE)

        existing = self._memoized
        self._mounting = (generation, element_id)
        try:
            await sdk.file_uploader.file_field.mount(
                element_id,
                self.config.mount_options(existing),
            )
        except Exception as exc:  # noqa: BLE001
            if not self._is_current(generation):
                return self.state
            logger.error("file_field event=mount_failed element_id=%s error=%s", element_id, exc)
            return self._fail(str(exc))
        finally:
            if self._mounting == (generation, element_id):
                self._mounting = None

        if not self._is_current(generation):
            # Closed while mounting: the new widget must not outlive its owner.
            self._unmount(sdk, element_id)
            return self.state

        self._mounted_element = element_id
        self._last_files = existing
        self.state = FieldState.READY
        logger.info(
            "file_field event=mounted element_id=%s field_key=%s files=%d",
            element_id,
            self.config.field_key,
            len(existing),
        )
        # The list may have changed while the mount was in flight.
        await self._push_files(generation)
        return self.state

    async def set_existing_files(self, files: Any) -> FieldState:
        self.config = self.config.model_copy(update={"existing_files": files})
        self._memoized = memoize_files(self._last_files, files)
        await self._push_files(self._generation)
        return self.state

    async def reconfigure(
        self,
        element_id: str | None = None,
        config: FileFieldConfig | Mapping[str, Any] | None = None,
    ) -> FieldState:
        new_element_id = element_id or self.element_id
        new_config = self.config
        if config is not None:
            new_config = (
                config
                if isinstance(config, FileFieldConfig)
                else FileFieldConfig.model_validate(config)
            )

        remount = new_element_id != self.element_id or any(
            getattr(self.config, key) != getattr(new_config, key) for key in REMOUNT_KEYS
        )
        if self.state is FieldState.ERROR:
            self.element_id = new_element_id
            self.config = new_config
            return self.state
        if not remount:
            return await self.set_existing_files(new_config.existing_files)

        self.close()
        self.element_id = new_element_id
        self.config = new_config
        self._memoized = memoize_files([], new_config.existing_files)
        return await self.start()

    def close(self) -> None:
        """Tear down: stop any pending start and unmount the widget if one exists."""
        self._generation += 1
        if self._closed is not None:
            self._closed.set()
        targets = [self._mounted_element] if self._mounted_element is not None else []
        if self._mounting is not None and self._mounting[1] not in targets:
            targets.append(self._mounting[1])
        sdk = self.sdk_slot.get() if targets else None
        if sdk is not None:
            for element_id in targets:
                self._unmount(sdk, element_id)
        self._mounted_element = None
        self._mounting = None
        self._last_files = []
        self.state = FieldState.CLOSED

    async def reload(self) -> FieldState:
        self.close()
        self._memoized = memoize_files([], self.config.existing_files)
        return await self.start()

    def render(self) -> str:
        return render_file_field(self.element_id, self.state.value, self.error)

    async def _wait_for_sdk(self, closed: asyncio.Event) -> VendorSDK | None:
        waiter = asyncio.ensure_future(self.sdk_slot.wait(self.timeout_s, self.clock))
        closing = asyncio.ensure_future(closed.wait())
        try:
            await asyncio.wait({waiter, closing}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for pending in (waiter, closing):
                if not pending.done():
                    pending.cancel()
        if waiter.done() and not waiter.cancelled():
            return waiter.result()
        return None

    async def _push_files(self, generation: int) -> None:
        if not self.config.field_key:
            return
        while (
            self.state is FieldState.READY
            and self._is_current(generation)
            and self._memoized != self._last_files
        ):
            sdk = self.sdk_slot.get()
            if sdk is None:
                return
            new_files = self._memoized
            self.state = FieldState.UPDATING
            uploader = sdk.file_uploader
            try:
                files_to_send = new_files
                if files_to_send and _needs_ui_format(files_to_send[0]):
                    files_to_send = uploader.to_ui_format(new_files)
                if files_to_send:
                    await uploader.file_field.update_files(self.config.field_key, files_to_send)
                else:
                    await uploader.file_field.clear_field(self.config.field_key)
            except Exception as exc:  # noqa: BLE001
                logger.error(
                    "file_field event=update_failed field_key=%s error=%s",
                    self.config.field_key,
                    exc,
                )
                if self._is_current(generation):
                    self._fail(str(exc))
                return
            if not self._is_current(generation):
                return
            self._last_files = new_files
            self.state = FieldState.READY

    def _unmount(self, sdk: VendorSDK, element_id: str) -> None:
        try:
            sdk.file_uploader.file_field.unmount(element_id)
        except Exception as exc:  # noqa: BLE001
            logger.error("file_field event=unmount_failed element_id=%s error=%s", element_id, exc)

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and self.state is not FieldState.CLOSED

    def _fail(self, message: str) -> FieldState:
        self.error = message
        self.state = FieldState.ERROR
        return self.state
