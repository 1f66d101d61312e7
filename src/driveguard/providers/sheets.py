"""Google Sheets as the reporting sink."""

from __future__ import annotations

import asyncio
from typing import Sequence

from driveguard.controller import GoogleSheetsController


class SheetsReportingSink:
    """Overwrites a spreadsheet from A1 with the report rows."""

    def __init__(self, controller: GoogleSheetsController, spreadsheet_id: str) -> None:
        self._controller = controller
        self._spreadsheet_id = spreadsheet_id

    @property
    def spreadsheet_id(self) -> str:
        return self._spreadsheet_id

    async def write_rows(self, rows: Sequence[Sequence[str]]) -> None:
        await asyncio.to_thread(self._controller.update_values, self._spreadsheet_id, rows)
