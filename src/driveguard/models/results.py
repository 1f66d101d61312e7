"""Result models for relocation requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(slots=True)
class MoveResult:
    """Outcome of a single move request against the storage provider."""

    file_id: str
    target_folder_id: str
    success: bool

    unchanged: bool = False
    name: Optional[str] = None
    parents: list[str] = field(default_factory=list)

    error_type: Optional[str] = None
    error_message: Optional[str] = None
