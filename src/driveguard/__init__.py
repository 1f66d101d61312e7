"""driveguard public API."""

from __future__ import annotations

from driveguard.auth import AuthInfo, OAuthClient
from driveguard.config import MonitorConfig
from driveguard.core import (
    BroadcastGateway,
    ChangeSet,
    ReconciliationLoop,
    RelocationPolicy,
    ScanStateMachine,
    StateStore,
    detect_changes,
    is_eicar_like,
)
from driveguard.errors import (
    ApiError,
    AuthError,
    ConflictError,
    DriveGuardError,
    HttpErrorInfo,
    InvalidArgumentError,
    NetworkError,
    NotAuthorizedError,
    NotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    map_http_error,
)
from driveguard.models import FileInfo, FileRecord, Location, MoveResult, ScanRecord, ScanStatus
from driveguard.observers import LoggingObserver, QueueObserver
from driveguard.service import DriveGuardService

__all__ = [
    # High-level
    "DriveGuardService",
    "MonitorConfig",
    "LoggingObserver",
    "QueueObserver",
    # Engine
    "StateStore",
    "ChangeSet",
    "detect_changes",
    "is_eicar_like",
    "ScanStateMachine",
    "RelocationPolicy",
    "ReconciliationLoop",
    "BroadcastGateway",
    # Auth
    "AuthInfo",
    "OAuthClient",
    # Models
    "FileInfo",
    "FileRecord",
    "Location",
    "ScanRecord",
    "ScanStatus",
    "MoveResult",
    # Errors
    "DriveGuardError",
    "InvalidArgumentError",
    "AuthError",
    "NotAuthorizedError",
    "PermissionError",
    "NotFoundError",
    "ConflictError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "HttpErrorInfo",
    "map_http_error",
]
