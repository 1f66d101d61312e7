"""Placeholder verdict policy.

This is not a malware detector: the verdict depends only on the file name,
which makes the whole workflow testable with EICAR-style file names.
"""

from __future__ import annotations

from typing import Callable

from driveguard.models import ScanStatus

_EICAR_LETTERS: str = "eicar"

Verdict = Callable[[str], ScanStatus]


def is_eicar_like(name: str | None) -> bool:
    """True if e, i, c, a, r appear in order (case-insensitive, gaps allowed)."""
    if not name:
        return False
    letters = iter(name.lower())
    return all(ch in letters for ch in _EICAR_LETTERS)


def name_verdict(name: str) -> ScanStatus:
    return ScanStatus.INFECTED if is_eicar_like(name) else ScanStatus.CLEAN
