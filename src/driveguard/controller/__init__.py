"""Internal controller exports for driveguard."""

from __future__ import annotations

from .drive_controller import GoogleDriveController
from .sheets_controller import GoogleSheetsController

__all__ = ["GoogleDriveController", "GoogleSheetsController"]
