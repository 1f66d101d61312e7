"""Monitored file records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .file_info import FileInfo


class Location(str, Enum):
    """Which monitored folder currently holds a file."""

    SCAN = "scan"
    QUARANTINE = "quarantine"


@dataclass(slots=True, frozen=True)
class FileRecord:
    """
    One entry per remotely observed file, keyed by file_id.

    Records are immutable; updates go through dataclasses.replace so that
    copies handed out by the state store never change under a caller.
    """

    file_id: str
    name: str
    mime_type: str
    location: Location

    size: Optional[int] = None
    modified_at: Optional[datetime] = None
    view_link: Optional[str] = None
    download_link: Optional[str] = None
    md5_checksum: Optional[str] = None

    @classmethod
    def from_file_info(cls, info: FileInfo, location: Location) -> FileRecord:
        return cls(
            file_id=info.file_id,
            name=info.name,
            mime_type=info.mime_type,
            location=location,
            size=info.size,
            modified_at=info.modified_time,
            view_link=info.web_view_link,
            download_link=info.web_content_link,
            md5_checksum=info.md5_checksum,
        )
