from __future__ import annotations

from functools import partial

import pytest

from support import FakeClock
from taskboard.config.settings import Settings
from taskboard.notify import CollectingNotifier
from taskboard.sdk.memory import InMemoryVendorSDK
from taskboard.sdk.slot import SdkSlot, build_record_client
from taskboard.services.file_service import FileService
from taskboard.services.task_service import TaskService


@pytest.fixture
def settings() -> Settings:
    return Settings(apper_project_id="proj-123", apper_public_key="pk-test")


@pytest.fixture
def sdk() -> InMemoryVendorSDK:
    return InMemoryVendorSDK(required_fields={"task_c": ("title_c",), "files_c": ("file_name_c",)})


@pytest.fixture
def slot(sdk: InMemoryVendorSDK) -> SdkSlot:
    return SdkSlot(sdk)


@pytest.fixture
def notifier() -> CollectingNotifier:
    return CollectingNotifier()


@pytest.fixture
def task_service(slot: SdkSlot, settings: Settings, notifier: CollectingNotifier) -> TaskService:
    return TaskService(partial(build_record_client, slot, settings), notifier)


@pytest.fixture
def file_service(slot: SdkSlot, settings: Settings, notifier: CollectingNotifier) -> FileService:
    return FileService(partial(build_record_client, slot, settings), notifier, sdk_slot=slot)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
