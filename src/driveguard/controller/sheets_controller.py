"""Google Sheets API controller (internal use only)."""

from __future__ import annotations

from typing import Any, Sequence

from driveguard.auth import OAuthClient

from .base import GoogleApiController


class GoogleSheetsController(GoogleApiController):
    """Writes value ranges into a spreadsheet."""

    def __init__(self, client: OAuthClient) -> None:
        self._service = client.build_service("sheets", "v4")

    @classmethod
    def from_service(cls, service: Any) -> "GoogleSheetsController":
        """Create controller from a pre-built Sheets service (useful for tests)."""
        obj = cls.__new__(cls)
        obj._service = service
        return obj

    def update_values(
        self,
        spreadsheet_id: str,
        rows: Sequence[Sequence[str]],
        *,
        range_: str = "A1",
    ) -> None:
        """Overwrite cells starting at range_ with rows (RAW input)."""
        req = self._service.spreadsheets().values().update(
            spreadsheetId=spreadsheet_id,
            range=range_,
            valueInputOption="RAW",
            body={"values": [list(r) for r in rows]},
        )
        self._execute(req.execute)
