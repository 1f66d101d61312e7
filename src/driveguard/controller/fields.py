"""Field definitions for Google Drive API responses."""

from __future__ import annotations

FILE_FIELDS: str = (
    "id,"
    "name,"
    "mimeType,"
    "parents,"
    "trashed,"
    "modifiedTime,"
    "size,"
    "md5Checksum,"
    "webViewLink,"
    "webContentLink"
)

PARENT_FIELDS: str = "id,name,parents"

LIST_FIELDS: str = f"nextPageToken,files({FILE_FIELDS})"
