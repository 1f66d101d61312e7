"""Google Drive v3 calls used by the folder monitor (internal use only)."""

from __future__ import annotations

from typing import Any, Iterator, Optional, Sequence

from driveguard.auth import OAuthClient
from driveguard.models import FileInfo
from driveguard.util.time import parse_rfc3339

from .base import GoogleApiController
from .fields import FILE_FIELDS, LIST_FIELDS, PARENT_FIELDS


class GoogleDriveController(GoogleApiController):
    """
    Blocking wrapper around the Drive `files` resource.

    Notes:
        - Only the calls the monitor needs: list a folder, read one file,
          re-parent a file, delete a file.
        - Shared drives are included when `supports_all_drives` is set.
        - Async callers run these methods in a worker thread.
    """

    def __init__(
        self,
        client: OAuthClient,
        *,
        supports_all_drives: bool = True,
    ) -> None:
        self._supports_all_drives = supports_all_drives
        self._service = client.build_service("drive", "v3")

    @classmethod
    def from_service(
        cls,
        service: Any,
        *,
        supports_all_drives: bool = True,
    ) -> "GoogleDriveController":
        """Wrap an already built Drive service (tests pass a Mock)."""
        obj = cls.__new__(cls)
        obj._supports_all_drives = supports_all_drives
        obj._service = service
        return obj

    def get(self, file_id: str, *, fields: str = FILE_FIELDS) -> FileInfo:
        files = self._service.files()
        data = self._execute(
            files.get(fileId=file_id, fields=fields, **self._drive_kwargs()).execute
        )
        return _file_dict_to_file_info(data)

    def get_parents(self, file_id: str) -> FileInfo:
        """Only id, name and parents are populated."""
        return self.get(file_id, fields=PARENT_FIELDS)

    def list_children(
        self,
        parent_id: str,
        *,
        include_trashed: bool = False,
    ) -> list[FileInfo]:
        """Direct children of parent_id, newest first, across all pages."""
        query = f"'{parent_id}' in parents"
        if not include_trashed:
            query += " and trashed = false"
        return [
            _file_dict_to_file_info(item)
            for page in self._pages(query)
            for item in page.get("files", [])
        ]

    def move(
        self,
        file_id: str,
        add_parent: str,
        remove_parents: Sequence[str],
    ) -> FileInfo:
        """Attach add_parent and detach remove_parents in a single update."""
        detach = [p for p in remove_parents if p != add_parent]
        update = self._service.files().update(
            fileId=file_id,
            addParents=add_parent,
            removeParents=",".join(detach) or None,
            fields=FILE_FIELDS,
            **self._drive_kwargs(),
        )
        return _file_dict_to_file_info(self._execute(update.execute))

    def delete_permanently(self, file_id: str) -> None:
        """Delete without going through the trash."""
        delete = self._service.files().delete(fileId=file_id, **self._drive_kwargs())
        self._execute(delete.execute)

    def _pages(self, query: str) -> Iterator[dict[str, Any]]:
        token: Optional[str] = None
        while True:
            listing = self._service.files().list(
                q=query,
                fields=LIST_FIELDS,
                orderBy="modifiedTime desc",
                pageSize=1000,
                pageToken=token,
                **self._drive_kwargs(listing=True),
            )
            page = self._execute(listing.execute)
            yield page
            token = page.get("nextPageToken")
            if not token:
                return

    def _drive_kwargs(self, *, listing: bool = False) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        kwargs: dict[str, Any] = {"supportsAllDrives": True}
        if listing:
            kwargs["includeItemsFromAllDrives"] = True
        return kwargs


def _text(data: dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    return value if isinstance(value, str) else None


def _timestamp(data: dict[str, Any], key: str):
    raw = _text(data, key)
    if raw is None:
        return None
    try:
        return parse_rfc3339(raw)
    except ValueError:
        return None


def _byte_size(data: dict[str, Any]) -> Optional[int]:
    # Drive sends int64 fields as decimal strings; Google Docs have none.
    raw = data.get("size")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.isdigit():
        return int(raw)
    return None


def _file_dict_to_file_info(data: dict[str, Any]) -> FileInfo:
    parents = data.get("parents")
    return FileInfo(
        file_id=_text(data, "id") or "",
        name=_text(data, "name") or "",
        mime_type=_text(data, "mimeType") or "",
        parents=list(parents) if isinstance(parents, list) else [],
        trashed=bool(data.get("trashed", False)),
        modified_time=_timestamp(data, "modifiedTime"),
        size=_byte_size(data),
        md5_checksum=_text(data, "md5Checksum"),
        web_view_link=_text(data, "webViewLink"),
        web_content_link=_text(data, "webContentLink"),
    )
