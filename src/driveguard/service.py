"""DriveGuardService: wires the engine together and serves observer requests."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from driveguard.auth import OAuthClient
from driveguard.config import MonitorConfig
from driveguard.controller import GoogleDriveController, GoogleSheetsController
from driveguard.core import (
    AsyncioScheduler,
    BroadcastGateway,
    Observer,
    ReconciliationLoop,
    RelocationPolicy,
    ScanStateMachine,
    Scheduler,
    StateStore,
    Verdict,
    name_verdict,
)
from driveguard.errors import DriveGuardError, NotAuthorizedError
from driveguard.models import (
    ChangeCounts,
    DeleteFailedEvent,
    FileDeletedEvent,
    FileMovedEvent,
    MoveFailedEvent,
    MoveResult,
    ScanRecord,
    ScanStatus,
)
from driveguard.providers import (
    DriveStorageProvider,
    ReportingSink,
    SheetsReportingSink,
    StorageProvider,
)
from driveguard.util.time import now_utc, to_rfc3339

logger = logging.getLogger(__name__)


class DriveGuardService:
    """
    Composition root for one monitored scan/quarantine folder pair.

    Notes:
        - All state lives in one StateStore owned by this service.
        - move/delete requests need the authorization signal; failures are
          replied to the requesting observer only, successes are broadcast.
    """

    def __init__(
        self,
        config: MonitorConfig,
        provider: StorageProvider,
        *,
        reporting_sink: Optional[ReportingSink] = None,
        scheduler: Optional[Scheduler] = None,
        verdict: Verdict = name_verdict,
        authorized: bool = False,
    ) -> None:
        self._config = config
        self._provider = provider
        self._authorized = authorized
        self._scheduler = scheduler or AsyncioScheduler()

        self.store = StateStore()
        self.gateway = BroadcastGateway(
            self.store,
            scan_folder_id=config.scan_folder_id,
            quarantine_folder_id=config.quarantine_folder_id,
            reporting_sink=reporting_sink,
        )
        self.relocation = RelocationPolicy(
            provider,
            self.store,
            self.gateway,
            scan_folder_id=config.scan_folder_id,
            quarantine_folder_id=config.quarantine_folder_id,
        )
        self.scanner = ScanStateMachine(
            self.store,
            self.gateway,
            self.relocation,
            self._scheduler,
            verdict=verdict,
            scanning_dwell=config.scanning_dwell,
            pending_dwell=config.pending_dwell,
        )
        self.reconciler = ReconciliationLoop(
            provider,
            self.store,
            self.scanner,
            self.gateway,
            self._scheduler,
            scan_folder_id=config.scan_folder_id,
            quarantine_folder_id=config.quarantine_folder_id,
            poll_interval=config.poll_interval,
            is_authorized=lambda: self._authorized,
        )

    @classmethod
    def from_oauth(cls, config: MonitorConfig, client: OAuthClient) -> DriveGuardService:
        """Build a service backed by Google Drive (and Sheets when configured)."""
        provider = DriveStorageProvider(GoogleDriveController(client))
        sink = None
        if config.sheet_id:
            sink = SheetsReportingSink(GoogleSheetsController(client), config.sheet_id)
        return cls(config, provider, reporting_sink=sink, authorized=True)

    @property
    def config(self) -> MonitorConfig:
        return self._config

    @property
    def authorized(self) -> bool:
        return self._authorized

    # ----------------------------
    # Lifecycle
    # ----------------------------
    def authorize(self) -> None:
        """Turn the authorization signal on and (re)start polling."""
        self._authorized = True
        self.reconciler.start()

    def start(self) -> None:
        if self._authorized:
            self.reconciler.start()
        else:
            logger.warning("Not authorized; polling starts after authorization")

    async def stop(self) -> None:
        await self.reconciler.stop()
        await self.scanner.cancel_all()
        await self.gateway.drain()

    async def join_scans(self) -> None:
        await self.scanner.join()
        await self.gateway.drain()

    async def run_forever(self) -> None:
        self.start()
        try:
            await asyncio.Event().wait()
        finally:
            await self.stop()

    # ----------------------------
    # Observers
    # ----------------------------
    async def connect(self, observer: Observer) -> None:
        self.gateway.add_observer(observer)
        logger.info("Client connected: %r", observer)
        await self.gateway.publish()

    def disconnect(self, observer: Observer) -> None:
        self.gateway.remove_observer(observer)
        logger.info("Client disconnected: %r", observer)

    async def rescan(self, file_id: Optional[str]) -> bool:
        """
        Rescan a file in either folder.

        Returns True if a new scan sequence was started. A file that is
        already being scanned only gets its scanning status re-asserted.
        """
        if not file_id:
            return False
        logger.info("Rescan requested for file %s", file_id)
        if self.scanner.begin_scan(file_id) is not None:
            return True
        self.store.set_scan(file_id, ScanRecord(ScanStatus.SCANNING))
        await self.gateway.publish()
        return False

    async def move(
        self,
        file_id: Optional[str],
        target_folder_id: Optional[str],
        reply: Optional[Observer] = None,
    ) -> Optional[MoveResult]:
        if not file_id or not target_folder_id:
            await self._reply(reply, MoveFailedEvent(file_id, "Missing fileId or targetFolderId"))
            return None
        try:
            self._require_authorized()
        except NotAuthorizedError as exc:
            await self._reply(reply, MoveFailedEvent(file_id, str(exc)))
            return None

        logger.info("Move requested for file %s -> folder %s", file_id, target_folder_id)
        result = await self.relocation.move_file(file_id, target_folder_id)
        if not result.success:
            await self._reply(reply, MoveFailedEvent(file_id, result.error_message or "Move failed"))
            return result

        await self.gateway.broadcast(
            FileMovedEvent(
                file_id=file_id,
                target_folder_id=target_folder_id,
                timestamp=now_utc(),
                unchanged=result.unchanged,
            )
        )
        await self.gateway.publish()
        return result

    async def delete(self, file_id: Optional[str], reply: Optional[Observer] = None) -> bool:
        """Permanently delete a file from Drive and forget it locally."""
        if not file_id:
            return False
        try:
            self._require_authorized()
            await self._provider.delete(file_id)
        except DriveGuardError as exc:
            logger.error("Delete failed for %s: %s", file_id, exc)
            await self._reply(reply, DeleteFailedEvent(file_id, str(exc)))
            return False

        self.store.remove(file_id)
        self.store.clear_scan(file_id)
        self.store.release(file_id)
        await self.gateway.broadcast(FileDeletedEvent(file_id=file_id, timestamp=now_utc()))
        await self.gateway.publish(ChangeCounts(deleted=1))
        return True

    # ----------------------------
    # Queries
    # ----------------------------
    def files_listing(self) -> dict[str, Any]:
        return {
            "files": self.store.client_view(),
            "authorized": self._authorized,
            "timestamp": to_rfc3339(now_utc()),
            "folders": self.gateway.folders(),
        }

    def status(self) -> dict[str, Any]:
        return {
            "authorized": self._authorized,
            "polling": self.reconciler.running,
            "fileCount": self.store.file_count(),
            "pollInterval": self._config.poll_interval_ms,
            "scanFolderId": self._config.scan_folder_id,
            "quarantineFolderId": self._config.quarantine_folder_id,
        }

    # ----------------------------
    # Internals
    # ----------------------------
    def _require_authorized(self) -> None:
        if not self._authorized:
            raise NotAuthorizedError("Not authorized")

    async def _reply(self, observer: Optional[Observer], event: Any) -> None:
        if observer is None:
            logger.warning("%s: %s", event.name, event.error)
            return
        await self.gateway.send_to(observer, event)
