"""Outbound observer events.

Event names and payload keys follow the wire format the browser client
listens for (``file_list``, ``scan_complete``, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Optional, Union

from driveguard.util.time import to_rfc3339


@dataclass(slots=True, frozen=True)
class ChangeCounts:
    added: int = 0
    modified: int = 0
    deleted: int = 0

    def to_payload(self) -> dict[str, int]:
        return {"added": self.added, "modified": self.modified, "deleted": self.deleted}


@dataclass(slots=True, frozen=True)
class FileListEvent:
    """Full client-facing file list (the merged view)."""

    name: ClassVar[str] = "file_list"

    files: list[dict[str, Any]]
    timestamp: datetime
    changes: ChangeCounts = field(default_factory=ChangeCounts)
    folders: dict[str, Optional[str]] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        return {
            "files": list(self.files),
            "timestamp": to_rfc3339(self.timestamp),
            "changes": self.changes.to_payload(),
            "folders": dict(self.folders),
        }


@dataclass(slots=True, frozen=True)
class ScanStatusEvent:
    name: ClassVar[str] = "scan_complete"

    file_id: str
    status: str
    timestamp: datetime
    message: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "fileId": self.file_id,
            "status": self.status,
            "timestamp": to_rfc3339(self.timestamp),
            "message": self.message,
        }


@dataclass(slots=True, frozen=True)
class FileMovedEvent:
    name: ClassVar[str] = "file_moved"

    file_id: str
    target_folder_id: str
    timestamp: datetime
    unchanged: bool = False
    message: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "fileId": self.file_id,
            "targetFolderId": self.target_folder_id,
            "timestamp": to_rfc3339(self.timestamp),
            "unchanged": self.unchanged,
        }
        if self.message is not None:
            payload["message"] = self.message
        return payload


@dataclass(slots=True, frozen=True)
class FileDeletedEvent:
    name: ClassVar[str] = "file_deleted"

    file_id: str
    timestamp: datetime

    def to_payload(self) -> dict[str, Any]:
        return {"fileId": self.file_id, "timestamp": to_rfc3339(self.timestamp)}


@dataclass(slots=True, frozen=True)
class AlertEvent:
    name: ClassVar[str] = "scan_alert"

    error: str
    file_id: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error}
        if self.file_id is not None:
            payload["fileId"] = self.file_id
        return payload


@dataclass(slots=True, frozen=True)
class MoveFailedEvent:
    name: ClassVar[str] = "move_failed"

    file_id: Optional[str]
    error: str

    def to_payload(self) -> dict[str, Any]:
        return {"fileId": self.file_id, "error": self.error}


@dataclass(slots=True, frozen=True)
class DeleteFailedEvent:
    name: ClassVar[str] = "delete_failed"

    file_id: Optional[str]
    error: str

    def to_payload(self) -> dict[str, Any]:
        return {"fileId": self.file_id, "error": self.error}


Event = Union[
    FileListEvent,
    ScanStatusEvent,
    FileMovedEvent,
    FileDeletedEvent,
    AlertEvent,
    MoveFailedEvent,
    DeleteFailedEvent,
]
