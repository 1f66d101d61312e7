"""Broadcast gateway: fans the merged file list and events out to observers."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

from driveguard.models import AlertEvent, ChangeCounts, Event, FileListEvent
from driveguard.providers.base import ReportingSink
from driveguard.util.time import now_utc

from .report import build_report_rows
from .state import StateStore

logger = logging.getLogger(__name__)


class Observer(Protocol):
    """A live connection receiving events (socket, queue, log, ...)."""

    async def send(self, event: Event) -> None:
        ...


class BroadcastGateway:
    """
    Builds the client-facing view and pushes it to every observer.

    Notes:
        - Report writes run in one background writer, in publish order, and
          only the newest pending list is written; failures of any kind become
          AlertEvents and never fail the broadcast itself.
        - An observer whose send fails is logged and skipped, not dropped.
    """

    def __init__(
        self,
        store: StateStore,
        *,
        scan_folder_id: str,
        quarantine_folder_id: Optional[str] = None,
        reporting_sink: Optional[ReportingSink] = None,
    ) -> None:
        self._store = store
        self._scan_folder_id = scan_folder_id
        self._quarantine_folder_id = quarantine_folder_id
        self._reporting_sink = reporting_sink
        self._observers: list[Observer] = []
        self._pending_report: Optional[FileListEvent] = None
        self._report_writer: Optional[asyncio.Task[None]] = None

    # ----------------------------
    # Observers
    # ----------------------------
    def add_observer(self, observer: Observer) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def folders(self) -> dict[str, Optional[str]]:
        return {
            "scanFolderId": self._scan_folder_id,
            "quarantineFolderId": self._quarantine_folder_id,
        }

    # ----------------------------
    # Emission
    # ----------------------------
    async def broadcast(self, event: Event) -> None:
        for observer in list(self._observers):
            await self.send_to(observer, event)

    async def send_to(self, observer: Observer, event: Event) -> None:
        try:
            await observer.send(event)
        except Exception:
            logger.warning("Failed to deliver %s to observer %r", event.name, observer, exc_info=True)

    async def alert(self, error: str, file_id: Optional[str] = None) -> None:
        await self.broadcast(AlertEvent(error=error, file_id=file_id))

    async def publish(self, changes: Optional[ChangeCounts] = None) -> FileListEvent:
        """Broadcast the current merged file list and forward it to the report sink."""
        event = FileListEvent(
            files=self._store.client_view(),
            timestamp=now_utc(),
            changes=changes or ChangeCounts(),
            folders=self.folders(),
        )
        await self.broadcast(event)

        if self._reporting_sink is not None:
            self._pending_report = event
            if self._report_writer is None or self._report_writer.done():
                self._report_writer = asyncio.create_task(
                    self._write_reports(self._reporting_sink), name="report-writer"
                )

        return event

    async def drain(self) -> None:
        """Wait until the newest published list has been written."""
        while self._report_writer is not None and not self._report_writer.done():
            await asyncio.gather(self._report_writer, return_exceptions=True)

    async def _write_reports(self, sink: ReportingSink) -> None:
        # One writer at a time; lists published meanwhile collapse into the newest.
        while self._pending_report is not None:
            event, self._pending_report = self._pending_report, None
            try:
                await sink.write_rows(build_report_rows(event.files))
            except Exception as exc:
                logger.error("Sheet update failed: %s", exc, exc_info=True)
                await self.alert(f"Sheet update failed: {exc}")
            else:
                logger.debug("Sheet updated with %d files", len(event.files))
