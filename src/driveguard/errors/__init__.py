"""Public error exports for driveguard."""

from __future__ import annotations

from .exceptions import (
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

__all__ = [
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
