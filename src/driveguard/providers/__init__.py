"""Storage provider and reporting sink implementations."""

from __future__ import annotations

from .base import ReportingSink, StorageProvider
from .drive import DriveStorageProvider
from .sheets import SheetsReportingSink

__all__ = [
    "StorageProvider",
    "ReportingSink",
    "DriveStorageProvider",
    "SheetsReportingSink",
]
