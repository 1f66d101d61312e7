"""Clock and timer capability used for dwell times and the poll period."""

from __future__ import annotations

import asyncio
import random
from typing import Optional, Protocol


class Scheduler(Protocol):
    def uniform(self, low: float, high: float) -> float:
        """Draw a dwell time in seconds from [low, high]."""
        ...

    async def sleep(self, seconds: float) -> None:
        ...


class AsyncioScheduler:
    """Real timers on the running event loop."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def uniform(self, low: float, high: float) -> float:
        return self._rng.uniform(low, high)

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
