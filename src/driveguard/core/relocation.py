"""Verdict-driven moves between the scan and quarantine folders."""

from __future__ import annotations

import logging
from typing import Optional

from driveguard.errors import DriveGuardError
from driveguard.models import (
    FileMovedEvent,
    FileRecord,
    Location,
    MoveResult,
    ScanRecord,
    ScanStatus,
)
from driveguard.providers.base import StorageProvider
from driveguard.util.time import now_utc

from .gateway import BroadcastGateway
from .state import StateStore

logger = logging.getLogger(__name__)


class RelocationPolicy:
    """
    Moves infected files into quarantine and restores clean ones.

    Every move re-reads the file's current parents first: relocation is not
    serialized with manual moves, so the remote state is the only reliable
    pre-check, and it makes a repeated move a no-op (unchanged=True).
    """

    def __init__(
        self,
        provider: StorageProvider,
        store: StateStore,
        gateway: BroadcastGateway,
        *,
        scan_folder_id: str,
        quarantine_folder_id: Optional[str] = None,
    ) -> None:
        self._provider = provider
        self._store = store
        self._gateway = gateway
        self._scan_folder_id = scan_folder_id
        self._quarantine_folder_id = quarantine_folder_id

    async def apply_verdict(
        self,
        file_id: str,
        verdict: ScanStatus,
        prior_location: Location,
    ) -> Optional[MoveResult]:
        """
        Relocate a file after a terminal verdict.

        Returns the MoveResult when a move was attempted, otherwise None.
        """
        if verdict is ScanStatus.INFECTED and prior_location is not Location.QUARANTINE:
            if self._quarantine_folder_id is None:
                return None
            logger.info("Auto-quarantine: moving file %s -> %s", file_id, self._quarantine_folder_id)
            return await self._relocate(
                file_id,
                self._quarantine_folder_id,
                moved_message="Auto-quarantined infected file",
                failure_message="Auto-quarantine failed",
            )

        if verdict is ScanStatus.CLEAN and prior_location is Location.QUARANTINE:
            logger.info("Auto-restore: moving clean file %s -> %s", file_id, self._scan_folder_id)
            return await self._relocate(
                file_id,
                self._scan_folder_id,
                moved_message="Restored clean file to scan folder",
                failure_message="Auto-restore failed",
            )

        return None

    async def move_file(self, file_id: str, target_folder_id: str) -> MoveResult:
        """
        Move file_id so that target_folder_id becomes its only parent.

        Failures are returned, not raised. Local bookkeeping follows the
        parents reported after the move.
        """
        try:
            current = await self._provider.get_parents(file_id)
        except DriveGuardError as exc:
            logger.error("Error reading parents of %s: %s", file_id, exc)
            return _failed(file_id, target_folder_id, exc)

        if target_folder_id in current.parents:
            return MoveResult(
                file_id=file_id,
                target_folder_id=target_folder_id,
                success=True,
                unchanged=True,
                name=current.name,
                parents=list(current.parents),
            )

        try:
            moved = await self._provider.move(file_id, target_folder_id, current.parents)
        except DriveGuardError as exc:
            logger.error("Error moving file %s -> %s: %s", file_id, target_folder_id, exc)
            return _failed(file_id, target_folder_id, exc)

        await self._record_new_parents(file_id, target_folder_id, moved.parents)
        return MoveResult(
            file_id=file_id,
            target_folder_id=target_folder_id,
            success=True,
            name=current.name,
            parents=list(moved.parents),
        )

    # ----------------------------
    # Internals
    # ----------------------------
    async def _relocate(
        self,
        file_id: str,
        target_folder_id: str,
        *,
        moved_message: str,
        failure_message: str,
    ) -> MoveResult:
        result = await self.move_file(file_id, target_folder_id)
        if not result.success:
            logger.error("%s for %s: %s", failure_message, file_id, result.error_message)
            await self._gateway.alert(result.error_message or failure_message, file_id=file_id)
            return result

        if result.unchanged:
            logger.info("File %s already in %s", file_id, target_folder_id)
            return result

        await self._gateway.broadcast(
            FileMovedEvent(
                file_id=file_id,
                target_folder_id=target_folder_id,
                timestamp=now_utc(),
                message=moved_message,
            )
        )
        await self._gateway.publish()
        return result

    async def _record_new_parents(
        self,
        file_id: str,
        target_folder_id: str,
        parents: list[str],
    ) -> None:
        if self._quarantine_folder_id and self._quarantine_folder_id in parents:
            self._store.relocate(file_id, Location.QUARANTINE)
            if target_folder_id == self._quarantine_folder_id:
                self._store.set_scan(file_id, ScanRecord(ScanStatus.INFECTED, now_utc()))
            return

        if self._scan_folder_id in parents:
            try:
                info = await self._provider.get_metadata(file_id)
            except DriveGuardError as exc:
                logger.warning("Moved %s into scan folder but failed to fetch metadata: %s", file_id, exc)
                self._store.relocate(file_id, Location.SCAN)
            else:
                self._store.upsert(FileRecord.from_file_info(info, Location.SCAN))
            self._store.set_scan(file_id, ScanRecord(ScanStatus.CLEAN, now_utc()))
            return

        if self._store.remove(file_id):
            logger.info("File %s moved out of monitored folders -> removed", file_id)
        self._store.clear_scan(file_id)


def _failed(file_id: str, target_folder_id: str, exc: DriveGuardError) -> MoveResult:
    return MoveResult(
        file_id=file_id,
        target_folder_id=target_folder_id,
        success=False,
        error_type=exc.__class__.__name__,
        error_message=str(exc),
    )
