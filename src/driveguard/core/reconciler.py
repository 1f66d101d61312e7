"""Periodic reconciliation of the monitored folders against known state."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from driveguard.errors import DriveGuardError
from driveguard.models import FileRecord, Location
from driveguard.providers.base import StorageProvider

from .changes import ChangeSet, detect_changes, sort_records
from .gateway import BroadcastGateway
from .scanner import ScanStateMachine
from .scheduler import Scheduler
from .state import StateStore

logger = logging.getLogger(__name__)


class ReconciliationLoop:
    """
    Polls the scan and quarantine folders and launches scans for changes.

    Notes:
        - Ticks never overlap: the diff/replace phase of one tick always runs
          against the list left by the previous tick.
        - A failed listing leaves the previous list in effect; the next
          period is the retry.
    """

    def __init__(
        self,
        provider: StorageProvider,
        store: StateStore,
        scanner: ScanStateMachine,
        gateway: BroadcastGateway,
        scheduler: Scheduler,
        *,
        scan_folder_id: str,
        quarantine_folder_id: Optional[str] = None,
        poll_interval: float = 15.0,
        is_authorized: Callable[[], bool] = lambda: True,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self._provider = provider
        self._store = store
        self._scanner = scanner
        self._gateway = gateway
        self._scheduler = scheduler
        self._scan_folder_id = scan_folder_id
        self._quarantine_folder_id = quarantine_folder_id
        self._poll_interval = poll_interval
        self._is_authorized = is_authorized
        self._tick_lock = asyncio.Lock()
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Tick now, then once per poll interval. Restarts a running loop."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = asyncio.create_task(self._loop(), name="reconciliation-loop")
        logger.info("Polling started (every %ss)", self._poll_interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Polling stopped")

    async def tick(self) -> Optional[ChangeSet]:
        """
        Run one reconciliation pass.

        Returns the detected ChangeSet, or None when the pass was skipped
        (not authorized) or aborted (listing failed).
        """
        if not self._is_authorized():
            logger.info("Not authorized. Skipping poll.")
            return None

        async with self._tick_lock:
            logger.debug("Polling folders...")
            before = {f.file_id: f.location for f in self._store.files()}
            try:
                snapshot = await self.fetch_snapshot()
            except DriveGuardError as exc:
                logger.error("Poll error: %s", exc)
                return None
            snapshot = self._keep_local_moves(before, snapshot)

            changes = detect_changes(self._store.files(), snapshot)
            if not changes.has_changes:
                logger.debug("No changes detected")
                self._store.prune_orphans()
                return changes

            counts = changes.counts()
            logger.info(
                "Changes detected: +%d ~%d -%d",
                counts.added,
                counts.modified,
                counts.deleted,
            )

            self._store.replace(snapshot)
            for record in changes.modified:
                self._store.clear_scan(record.file_id)
            for record in changes.deleted:
                self._store.clear_scan(record.file_id)
                self._store.release(record.file_id)
            self._store.prune_orphans()

            for record in [*changes.added, *changes.modified]:
                if record.location is Location.SCAN:
                    self._scanner.begin_scan(record.file_id)

        await self._gateway.publish(counts)
        return changes

    async def fetch_snapshot(self) -> list[FileRecord]:
        """List both folders and merge by id; quarantine wins on collision."""
        merged: dict[str, FileRecord] = {}
        for info in await self._provider.list_folder(self._scan_folder_id):
            merged[info.file_id] = FileRecord.from_file_info(info, Location.SCAN)
        if self._quarantine_folder_id:
            for info in await self._provider.list_folder(self._quarantine_folder_id):
                merged[info.file_id] = FileRecord.from_file_info(info, Location.QUARANTINE)
        return sort_records(merged.values())

    def _keep_local_moves(
        self,
        before: dict[str, Location],
        snapshot: list[FileRecord],
    ) -> list[FileRecord]:
        """
        Prefer the local record for files relocated while the folders were listed.

        A listing can predate a move that finished during the await; taking it
        as-is would flip the file back and rescan it until the next tick.
        """
        current = {f.file_id: f for f in self._store.files()}
        kept: list[FileRecord] = []
        for record in snapshot:
            local = current.get(record.file_id)
            if (
                local is not None
                and record.file_id in before
                and local.location is not before[record.file_id]
                and local.location is not record.location
            ):
                logger.debug("Keeping local location of %s over a stale listing", record.file_id)
                kept.append(local)
            else:
                kept.append(record)
        return sort_records(kept)

    async def _loop(self) -> None:
        while True:
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Unexpected error during poll")
            await self._scheduler.sleep(self._poll_interval)
