"""Public model exports for driveguard."""

from __future__ import annotations

from .events import (
    AlertEvent,
    ChangeCounts,
    DeleteFailedEvent,
    Event,
    FileDeletedEvent,
    FileListEvent,
    FileMovedEvent,
    MoveFailedEvent,
    ScanStatusEvent,
)
from .file_info import FileInfo
from .file_record import FileRecord, Location
from .results import MoveResult
from .scan_record import ScanRecord, ScanStatus, default_status

__all__ = [
    "FileInfo",
    "FileRecord",
    "Location",
    "ScanRecord",
    "ScanStatus",
    "default_status",
    "MoveResult",
    "ChangeCounts",
    "Event",
    "FileListEvent",
    "ScanStatusEvent",
    "FileMovedEvent",
    "FileDeletedEvent",
    "AlertEvent",
    "MoveFailedEvent",
    "DeleteFailedEvent",
]
