"""Tabular projection of the file list for the reporting sink."""

from __future__ import annotations

from typing import Any, Sequence

from driveguard.models import Location, default_status
from driveguard.util.mime import mime_label
from driveguard.util.time import EARLIEST, parse_rfc3339

REPORT_HEADER: tuple[str, ...] = ("MD5", "Name", "Size", "Type", "Time", "Status")


def build_report_rows(files: Sequence[dict[str, Any]]) -> list[list[str]]:
    """
    Build sheet rows (header first) from client-facing file dicts.

    Rows are ordered by modified time, newest first.
    """
    rows: list[list[str]] = [list(REPORT_HEADER)]
    for f in sorted(files, key=_modified_key, reverse=True):
        rows.append(
            [
                f.get("md5Checksum") or "-",
                f.get("name") or "",
                str(f["size"]) if f.get("size") is not None else "-",
                mime_label(f.get("mimeType")),
                f.get("modifiedTime") or "",
                f.get("scanStatus") or _fallback_status(f.get("source")),
            ]
        )
    return rows


def _modified_key(f: dict[str, Any]):
    value = f.get("modifiedTime")
    if not value:
        return EARLIEST
    try:
        return parse_rfc3339(value)
    except ValueError:
        return EARLIEST


def _fallback_status(source: str | None) -> str:
    location = Location.QUARANTINE if source == Location.QUARANTINE.value else Location.SCAN
    return default_status(location).value
