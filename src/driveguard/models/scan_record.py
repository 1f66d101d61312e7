"""Per-file scan status."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .file_record import Location


class ScanStatus(str, Enum):
    PENDING = "pending"
    SCANNING = "scanning"
    CLEAN = "clean"
    INFECTED = "infected"

    @property
    def is_terminal(self) -> bool:
        return self in (ScanStatus.CLEAN, ScanStatus.INFECTED)


@dataclass(slots=True, frozen=True)
class ScanRecord:
    status: ScanStatus
    last_scanned_at: Optional[datetime] = None


def default_status(location: Location) -> ScanStatus:
    """Status of a file that has no ScanRecord yet."""
    if location is Location.QUARANTINE:
        return ScanStatus.INFECTED
    return ScanStatus.PENDING
