"""Ready-made observers for the broadcast gateway."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional

from driveguard.models import Event


def event_message(event: Event) -> dict[str, Any]:
    """Transport-neutral envelope: {"event": name, "data": payload}."""
    return {"event": event.name, "data": event.to_payload()}


class LoggingObserver:
    """Writes every event to a logger; file lists are summarized."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger("driveguard.events")

    async def send(self, event: Event) -> None:
        payload = event.to_payload()
        if event.name == "file_list":
            self._logger.info(
                "file_list: %d files, changes=%s",
                len(payload["files"]),
                json.dumps(payload["changes"]),
            )
            return
        self._logger.info("%s: %s", event.name, json.dumps(payload))

    def __repr__(self) -> str:
        return f"LoggingObserver({self._logger.name!r})"


class QueueObserver:
    """
    Buffers event envelopes for a transport adapter (websocket, SSE, ...).

    The adapter drains `queue`; when it is full the oldest message is dropped,
    so a slow client never blocks the broadcast.
    """

    def __init__(self, maxsize: int = 100) -> None:
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=maxsize)

    async def send(self, event: Event) -> None:
        message = event_message(event)
        if self.queue.full():
            self.queue.get_nowait()
        self.queue.put_nowait(message)
