from __future__ import annotations

import asyncio

import pytest

from support import FakeClock, settle
from taskboard.config.settings import Settings
from taskboard.sdk.memory import InMemoryVendorSDK
from taskboard.sdk.responses import RecordResponse
from taskboard.sdk.slot import SdkSlot, build_record_client, load_sdk


@pytest.mark.asyncio
async def test_wait_returns_published_sdk_immediately(sdk: InMemoryVendorSDK) -> None:
    assert await SdkSlot(sdk).wait(5.0, FakeClock()) is sdk


@pytest.mark.asyncio
async def test_wait_times_out_without_publish(clock: FakeClock) -> None:
    slot = SdkSlot()

    waiting = asyncio.create_task(slot.wait(5.0, clock))
    await settle()
    clock.advance(4.9)
    await settle()
    assert not waiting.done()

    clock.advance(0.1)
    assert await waiting is None


@pytest.mark.asyncio
async def test_cancelled_wait_releases_timer(clock: FakeClock) -> None:
    slot = SdkSlot()

    waiting = asyncio.create_task(slot.wait(5.0, clock))
    await settle()
    waiting.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiting
    await settle()

    assert clock.pending() == 0


def test_load_sdk_from_factory_path() -> None:
    sdk = load_sdk("taskboard.sdk.memory:build_in_memory_sdk")

    assert isinstance(sdk, InMemoryVendorSDK)


@pytest.mark.parametrize(
    ("path", "message"),
    [
        ("taskboard.sdk.memory", "Invalid SDK factory"),
        (":build", "Invalid SDK factory"),
        ("taskboard.missing_module:factory", "could not be imported"),
        ("taskboard.sdk.memory:no_such_factory", "is not callable"),
    ],
)
def test_load_sdk_rejects_bad_paths(path: str, message: str) -> None:
    with pytest.raises(RuntimeError, match=message):
        load_sdk(path)


def test_build_record_client_uses_env_fallback(
    sdk: InMemoryVendorSDK, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("VITE_APPER_PROJECT_ID", "vite-project")
    monkeypatch.setenv("VITE_APPER_PUBLIC_KEY", "vite-key")

    client = build_record_client(SdkSlot(sdk), Settings())

    assert client is sdk.store
    assert sdk.client_options == [{"apper_project_id": "vite-project", "apper_public_key": "vite-key"}]


def test_build_record_client_without_sdk(settings: Settings) -> None:
    assert build_record_client(SdkSlot(), settings) is None


def test_settings_readiness_budget_and_env_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKBOARD_TASK_TABLE", "task_archive_c")
    monkeypatch.setenv("TASKBOARD_SDK_POLL_MAX_ATTEMPTS", "20")

    settings = Settings()

    assert settings.task_table == "task_archive_c"
    assert settings.sdk_ready_timeout_s() == pytest.approx(2.0)
    assert Settings(sdk_poll_max_attempts=50).sdk_ready_timeout_s() == pytest.approx(5.0)


def test_record_response_partitions_results() -> None:
    response = RecordResponse.model_validate(
        {
            "success": True,
            "results": [
                {"success": True, "data": {"Id": 1}},
                {"success": False, "errors": ["Name is required", {"fieldLabel": "Due", "message": "bad date"}]},
            ],
        }
    )

    successful, failed = response.partition()

    assert [result.data for result in successful] == [{"Id": 1}]
    assert failed[0].messages() == ["Name is required", "Due: bad date"]
