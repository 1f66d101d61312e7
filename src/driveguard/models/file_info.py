"""Data model for Drive items as returned by the storage provider."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class FileInfo:
    """
    Represents a Drive item as reported by the provider.

    Notes:
        - Only the fields requested from the API are populated; a parents-only
          lookup leaves everything except file_id/name/parents at defaults.
    """

    file_id: str
    name: str = ""
    mime_type: str = ""
    parents: list[str] = field(default_factory=list)

    trashed: bool = False
    modified_time: Optional[datetime] = None
    size: Optional[int] = None
    md5_checksum: Optional[str] = None
    web_view_link: Optional[str] = None
    web_content_link: Optional[str] = None
