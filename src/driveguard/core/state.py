"""In-memory authoritative state: monitored files, scan records, activity lock."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional, Sequence

from driveguard.models import FileRecord, Location, ScanRecord, default_status
from driveguard.util.time import to_rfc3339_or_none

from .changes import sort_records

logger = logging.getLogger(__name__)


class ActivityToken:
    """Identifies one scan sequence holding the activity lock for a file."""

    __slots__ = ("file_id",)

    def __init__(self, file_id: str) -> None:
        self.file_id = file_id

    def __repr__(self) -> str:
        return f"ActivityToken({self.file_id!r})"


class StateStore:
    """
    Authoritative record of known files and their scan statuses.

    Notes:
        - Only ever touched from the event loop thread; there is no true
          parallel writer, only interleaved coroutines. Callers must re-check
          existence after every await.
        - Readers get copies (records are frozen, lists are fresh).
    """

    def __init__(self) -> None:
        self._files: list[FileRecord] = []
        self._scans: dict[str, ScanRecord] = {}
        self._active: dict[str, ActivityToken] = {}

    # ----------------------------
    # Files
    # ----------------------------
    def files(self) -> list[FileRecord]:
        return list(self._files)

    def file_count(self) -> int:
        return len(self._files)

    def get_file(self, file_id: str) -> Optional[FileRecord]:
        for record in self._files:
            if record.file_id == file_id:
                return record
        return None

    def replace(self, snapshot: Sequence[FileRecord]) -> None:
        self._files = list(snapshot)

    def upsert(self, record: FileRecord) -> None:
        """Insert or update a record, keeping presentation order."""
        others = [f for f in self._files if f.file_id != record.file_id]
        self._files = sort_records([*others, record])

    def relocate(self, file_id: str, location: Location) -> Optional[FileRecord]:
        """Change the location of a known file. Returns the new record or None."""
        current = self.get_file(file_id)
        if current is None:
            return None
        updated = replace(current, location=location)
        self._files = [updated if f.file_id == file_id else f for f in self._files]
        return updated

    def remove(self, file_id: str) -> bool:
        before = len(self._files)
        self._files = [f for f in self._files if f.file_id != file_id]
        return len(self._files) != before

    # ----------------------------
    # Scan records
    # ----------------------------
    def get_scan(self, file_id: str) -> Optional[ScanRecord]:
        return self._scans.get(file_id)

    def set_scan(self, file_id: str, record: ScanRecord) -> None:
        self._scans[file_id] = record

    def clear_scan(self, file_id: str) -> None:
        self._scans.pop(file_id, None)

    def prune_orphans(self) -> int:
        """Drop scan records of files no longer known and not being scanned."""
        known = {f.file_id for f in self._files}
        orphans = [
            file_id
            for file_id in self._scans
            if file_id not in known and file_id not in self._active
        ]
        for file_id in orphans:
            del self._scans[file_id]
        if orphans:
            logger.debug("Pruned %d orphaned scan records", len(orphans))
        return len(orphans)

    # ----------------------------
    # Activity lock
    # ----------------------------
    def is_active(self, file_id: str) -> bool:
        return file_id in self._active

    def acquire(self, file_id: str) -> Optional[ActivityToken]:
        """Mark file_id as being scanned. Returns None if already marked."""
        if file_id in self._active:
            return None
        token = ActivityToken(file_id)
        self._active[file_id] = token
        return token

    def holds(self, token: ActivityToken) -> bool:
        return self._active.get(token.file_id) is token

    def release(self, file_id: str, token: Optional[ActivityToken] = None) -> None:
        """
        Clear lock membership.

        With a token, only that sequence's own entry is cleared, so a sequence
        that lost its lock (file deleted, then seen again and rescanned) cannot
        release a newer sequence's lock.
        """
        if token is not None and self._active.get(file_id) is not token:
            return
        self._active.pop(file_id, None)

    def active_ids(self) -> set[str]:
        return set(self._active)

    # ----------------------------
    # Views
    # ----------------------------
    def resolve_scan(self, record: FileRecord) -> ScanRecord:
        scan = self._scans.get(record.file_id)
        if scan is not None:
            return scan
        return ScanRecord(status=default_status(record.location))

    def client_view(self) -> list[dict[str, Any]]:
        """Merged FileRecord + ScanRecord view sent to observers."""
        return [_to_client_dict(f, self.resolve_scan(f)) for f in self._files]


def _to_client_dict(record: FileRecord, scan: ScanRecord) -> dict[str, Any]:
    return {
        "id": record.file_id,
        "name": record.name,
        "mimeType": record.mime_type,
        "size": record.size,
        "modifiedTime": to_rfc3339_or_none(record.modified_at),
        "webViewLink": record.view_link,
        "webContentLink": record.download_link,
        "md5Checksum": record.md5_checksum,
        "scanStatus": scan.status.value,
        "lastScannedAt": to_rfc3339_or_none(scan.last_scanned_at),
        "source": record.location.value,
    }
