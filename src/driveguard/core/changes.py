"""Snapshot diffing for the reconciliation loop."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from driveguard.models import ChangeCounts, FileRecord
from driveguard.util.time import EARLIEST


@dataclass(slots=True)
class ChangeSet:
    """
    Partition of two snapshots.

    added/modified/unchanged keep the order of the current snapshot;
    deleted keeps the order of the previous one.
    """

    added: list[FileRecord] = field(default_factory=list)
    modified: list[FileRecord] = field(default_factory=list)
    deleted: list[FileRecord] = field(default_factory=list)
    unchanged: list[FileRecord] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.modified or self.deleted)

    def counts(self) -> ChangeCounts:
        return ChangeCounts(
            added=len(self.added),
            modified=len(self.modified),
            deleted=len(self.deleted),
        )


def detect_changes(
    previous: Sequence[FileRecord],
    current: Sequence[FileRecord],
) -> ChangeSet:
    """
    Compare two snapshots by file id.

    A file present in both is modified when its modified time or its location
    differs; a move between folders must be re-evaluated like a content edit.
    """
    previous_by_id = {f.file_id: f for f in previous}
    current_ids = {f.file_id for f in current}

    changes = ChangeSet()
    for record in current:
        old = previous_by_id.get(record.file_id)
        if old is None:
            changes.added.append(record)
        elif old.modified_at != record.modified_at or old.location is not record.location:
            changes.modified.append(record)
        else:
            changes.unchanged.append(record)

    for record in previous:
        if record.file_id not in current_ids:
            changes.deleted.append(record)

    return changes


def sort_records(records: Iterable[FileRecord]) -> list[FileRecord]:
    """Order by modified time descending, ties broken by name descending."""
    by_name = sorted(records, key=lambda r: r.name, reverse=True)
    return sorted(by_name, key=lambda r: r.modified_at or EARLIEST, reverse=True)
