"""Per-file scan workflow: scanning -> pending -> clean | infected."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from driveguard.models import ScanRecord, ScanStatus, ScanStatusEvent
from driveguard.util.time import now_utc

from .gateway import BroadcastGateway
from .relocation import RelocationPolicy
from .scheduler import Scheduler
from .state import ActivityToken, StateStore
from .verdict import Verdict, name_verdict

logger = logging.getLogger(__name__)

DEFAULT_SCANNING_DWELL: tuple[float, float] = (5.0, 15.0)
DEFAULT_PENDING_DWELL: tuple[float, float] = (1.0, 10.0)

_VERDICT_MESSAGES: dict[ScanStatus, str] = {
    ScanStatus.CLEAN: "File is clean",
    ScanStatus.INFECTED: "File flagged as infected (EICAR-like pattern)",
}


class ScanStateMachine:
    """
    Drives one scan sequence per file, at most one in flight per file id.

    Each sequence runs as its own task:
        1. status scanning, broadcast
        2. dwell (scanning range), status pending, broadcast
        3. dwell (pending range), verdict, status clean/infected, broadcast
        4. relocation by verdict, then the activity lock is released

    After every dwell the sequence checks that it still owns the activity
    lock and that the file is still known; if not, it ends quietly.
    """

    def __init__(
        self,
        store: StateStore,
        gateway: BroadcastGateway,
        relocation: RelocationPolicy,
        scheduler: Scheduler,
        *,
        verdict: Verdict = name_verdict,
        scanning_dwell: tuple[float, float] = DEFAULT_SCANNING_DWELL,
        pending_dwell: tuple[float, float] = DEFAULT_PENDING_DWELL,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._relocation = relocation
        self._scheduler = scheduler
        self._verdict = verdict
        self._scanning_dwell = scanning_dwell
        self._pending_dwell = pending_dwell
        self._tasks: dict[asyncio.Task[Optional[ScanStatus]], ActivityToken] = {}

    def begin_scan(self, file_id: str) -> Optional[asyncio.Task[Optional[ScanStatus]]]:
        """
        Start a scan sequence for file_id.

        Returns the sequence task, or None when file_id is already being scanned.
        """
        token = self._store.acquire(file_id)
        if token is None:
            logger.debug("Scan already in progress for %s", file_id)
            return None

        self._store.set_scan(file_id, ScanRecord(ScanStatus.SCANNING))
        task = asyncio.create_task(self._run(file_id, token), name=f"scan:{file_id}")
        self._tasks[task] = token
        task.add_done_callback(self._on_done)
        return task

    def is_scanning(self, file_id: str) -> bool:
        return self._store.is_active(file_id)

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def join(self) -> None:
        """Wait until no scan sequence is in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_all(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        await self.join()

    # ----------------------------
    # Internals
    # ----------------------------
    async def _run(self, file_id: str, token: ActivityToken) -> Optional[ScanStatus]:
        try:
            await self._gateway.publish()

            await self._scheduler.sleep(self._scheduler.uniform(*self._scanning_dwell))
            if not self._still_owned(token):
                return None

            self._store.set_scan(file_id, ScanRecord(ScanStatus.PENDING))
            await self._gateway.broadcast(
                ScanStatusEvent(
                    file_id=file_id,
                    status=ScanStatus.PENDING.value,
                    timestamp=now_utc(),
                    message="Scan in progress (pending)",
                )
            )
            await self._gateway.publish()

            await self._scheduler.sleep(self._scheduler.uniform(*self._pending_dwell))
            if not self._still_owned(token):
                return None

            record = self._store.get_file(file_id)
            if record is None:
                logger.info("File %s is no longer monitored; scan ends without verdict", file_id)
                return None

            try:
                verdict = self._verdict(record.name)
            except Exception as exc:
                logger.exception("Error finalizing scan of %s", file_id)
                await self._gateway.alert(f"Scan failed: {exc}", file_id=file_id)
                return None

            now = now_utc()
            self._store.set_scan(file_id, ScanRecord(verdict, now))
            logger.info("Scan of %s (%s) finished: %s", file_id, record.name, verdict.value)
            await self._gateway.broadcast(
                ScanStatusEvent(
                    file_id=file_id,
                    status=verdict.value,
                    timestamp=now,
                    message=_VERDICT_MESSAGES.get(verdict, verdict.value),
                )
            )
            await self._gateway.publish()

            await self._relocation.apply_verdict(file_id, verdict, record.location)
            return verdict
        finally:
            self._store.release(file_id, token)

    def _still_owned(self, token: ActivityToken) -> bool:
        if self._store.holds(token):
            return True
        logger.info("Scan of %s abandoned: file removed while scanning", token.file_id)
        return False

    def _on_done(self, task: asyncio.Task[Optional[ScanStatus]]) -> None:
        token = self._tasks.pop(task, None)
        if task.cancelled():
            # A task cancelled before its first step never ran its finally.
            if token is not None:
                self._store.release(token.file_id, token)
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Scan task %s failed", task.get_name(), exc_info=exc)
