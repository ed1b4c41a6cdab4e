"""Vendor SDK interfaces, readiness handle, and in-memory double."""

from taskboard.sdk.base import FileFieldApi, FileUploaderApi, RecordStoreClient, VendorSDK
from taskboard.sdk.memory import InMemoryRecordStore, InMemoryVendorSDK, build_in_memory_sdk
from taskboard.sdk.responses import FieldError, RecordResponse, RecordResult
from taskboard.sdk.slot import AsyncioClock, Clock, SdkSlot, build_record_client, load_sdk

__all__ = [
    "AsyncioClock",
    "Clock",
    "FieldError",
    "FileFieldApi",
    "FileUploaderApi",
    "InMemoryRecordStore",
    "InMemoryVendorSDK",
    "RecordResponse",
    "RecordResult",
    "RecordStoreClient",
    "SdkSlot",
    "VendorSDK",
    "build_in_memory_sdk",
    "build_record_client",
    "load_sdk",
]
