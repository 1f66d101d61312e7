"""Capabilities the monitor needs from the outside world."""

from __future__ import annotations

from typing import Protocol, Sequence

from driveguard.models import FileInfo


class StorageProvider(Protocol):
    """
    Remote file storage.

    Failures are raised as driveguard errors (NotFoundError, ApiError, ...).
    """

    async def list_folder(self, folder_id: str) -> list[FileInfo]:
        """Non-trashed direct children of folder_id."""
        ...

    async def get_parents(self, file_id: str) -> FileInfo:
        """FileInfo with at least file_id, name and parents populated."""
        ...

    async def move(
        self,
        file_id: str,
        add_parent: str,
        remove_parents: Sequence[str],
    ) -> FileInfo:
        """Returns the file with its parents after the move."""
        ...

    async def delete(self, file_id: str) -> None:
        ...

    async def get_metadata(self, file_id: str) -> FileInfo:
        ...


class ReportingSink(Protocol):
    async def write_rows(self, rows: Sequence[Sequence[str]]) -> None:
        """Overwrite the report with rows (header row included)."""
        ...


__all__ = ["StorageProvider", "ReportingSink"]
