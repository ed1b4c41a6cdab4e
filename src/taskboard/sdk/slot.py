"""Explicit handle on the vendor SDK and its readiness signal."""

from __future__ import annotations

import asyncio
import importlib
import logging
from typing import TYPE_CHECKING, Protocol

from taskboard.sdk.base import RecordStoreClient, VendorSDK

if TYPE_CHECKING:
    from taskboard.config.settings import Settings

logger = logging.getLogger(__name__)


class Clock(Protocol):
    async def sleep(self, seconds: float) -> None: ...


class AsyncioClock:
    """Default clock backed by the running event loop."""

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class SdkSlot:
    """Holds the vendor SDK once it has been loaded.

    Consumers either read it directly with `get()` or wait on the readiness
    signal with a deadline. Waiting never polls: it races the publish event
    against a single clock sleep.
    """

    def __init__(self, sdk: VendorSDK | None = None) -> None:
        self._sdk = sdk
        self._published = asyncio.Event()
        if sdk is not None:
            self._published.set()

    def get(self) -> VendorSDK | None:
        return self._sdk

    def publish(self, sdk: VendorSDK) -> None:
        self._sdk = sdk
        self._published.set()
        logger.info("sdk_slot event=published sdk=%s", type(sdk).__name__)

    async def wait(self, timeout_s: float, clock: Clock | None = None) -> VendorSDK | None:
        """Return the SDK once published, or None when the deadline passes first."""
        if self._sdk is not None:
            return self._sdk
        clock = clock or AsyncioClock()
        published = asyncio.ensure_future(self._published.wait())
        deadline = asyncio.ensure_future(clock.sleep(timeout_s))
        try:
            await asyncio.wait({published, deadline}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for pending in (published, deadline):
                if not pending.done():
                    pending.cancel()
        return self._sdk


def load_sdk(path: str) -> VendorSDK:
    """Import `module:callable` and call it to build the vendor SDK."""
    module_name, separator, attribute = path.partition(":")
    if not separator or not module_name or not attribute:
        raise RuntimeError(f"Invalid SDK factory {path!r}. Expected 'package.module:callable'.")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise RuntimeError(f"Vendor SDK module {module_name!r} could not be imported.") from exc
    factory = getattr(module, attribute, None)
    if factory is None or not callable(factory):
        raise RuntimeError(f"Vendor SDK factory {path!r} is not callable.")
    return factory()


def build_record_client(slot: SdkSlot, settings: Settings) -> RecordStoreClient | None:
    """Create a record-store client, or None while the SDK is unavailable."""
    sdk = slot.get()
    if sdk is None:
        logger.error("record_client event=sdk_unavailable")
        return None
    return sdk.create_client(
        apper_project_id=settings.resolved_project_id(),
        apper_public_key=settings.resolved_public_key(),
    )
