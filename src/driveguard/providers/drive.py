"""Google Drive as the storage provider."""

from __future__ import annotations

import asyncio
from typing import Sequence

from driveguard.controller import GoogleDriveController
from driveguard.models import FileInfo


class DriveStorageProvider:
    """
    Async facade over GoogleDriveController.

    Blocking API calls run in a worker thread; results are handed back to
    the event loop, which stays the only writer of in-process state.
    """

    def __init__(self, controller: GoogleDriveController) -> None:
        self._controller = controller

    async def list_folder(self, folder_id: str) -> list[FileInfo]:
        files = await asyncio.to_thread(self._controller.list_children, folder_id)
        return [f for f in files if not f.trashed]

    async def get_parents(self, file_id: str) -> FileInfo:
        return await asyncio.to_thread(self._controller.get_parents, file_id)

    async def move(
        self,
        file_id: str,
        add_parent: str,
        remove_parents: Sequence[str],
    ) -> FileInfo:
        return await asyncio.to_thread(
            self._controller.move, file_id, add_parent, list(remove_parents)
        )

    async def delete(self, file_id: str) -> None:
        await asyncio.to_thread(self._controller.delete_permanently, file_id)

    async def get_metadata(self, file_id: str) -> FileInfo:
        return await asyncio.to_thread(self._controller.get, file_id)
