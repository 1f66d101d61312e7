"""driveguard exceptions and the Google HTTP error mapping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class DriveGuardError(Exception):
    """
    Root of every error raised by driveguard.

    Attributes:
        details: Structured context (HTTP status, reason, file id, ...).
        cause: The lower-level exception this one wraps, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class InvalidArgumentError(DriveGuardError):
    """Bad configuration value or rejected request (HTTP 400)."""


class AuthError(DriveGuardError):
    """Token missing, unreadable or not refreshable (HTTP 401)."""


class NotAuthorizedError(DriveGuardError):
    """A move/delete arrived while the authorization signal is off."""


class PermissionError(DriveGuardError):
    """Access denied on a file or folder (HTTP 403, not quota)."""


class NotFoundError(DriveGuardError):
    """File or folder does not exist, or is not visible (HTTP 404)."""


class ConflictError(DriveGuardError):
    """Concurrent modification (HTTP 409/412)."""


class RateLimitError(DriveGuardError):
    """Too many requests (HTTP 429); retried by the controllers."""


class QuotaExceededError(DriveGuardError):
    """Quota or rate limit reported through HTTP 403."""


class NetworkError(DriveGuardError):
    """Transport failure before any HTTP response; retried by the controllers."""


class ApiError(DriveGuardError):
    """Anything else, 5xx included."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """The parts of a Google HTTP error needed to pick an exception class."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_STATUS_ERRORS: dict[int, type[DriveGuardError]] = {
    400: InvalidArgumentError,
    401: AuthError,
    404: NotFoundError,
    409: ConflictError,
    412: ConflictError,
    429: RateLimitError,
}

_QUOTA_MARKERS: tuple[str, ...] = (
    "quota",
    "ratelimitexceeded",
    "dailylimitexceeded",
    "usagelimits",
)


def _is_quota_reason(reason: str | None) -> bool:
    lowered = (reason or "").lower()
    return any(marker in lowered for marker in _QUOTA_MARKERS)


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> DriveGuardError:
    """
    Pick the driveguard exception for a Google API HTTP error.

    400 invalid argument, 401 auth, 403 quota or permission (by reason),
    404 not found, 409/412 conflict, 429 rate limit, everything else ApiError.
    """
    details: dict[str, Any] = {"status_code": info.status_code, "reason": info.reason}
    details.update(info.details or {})
    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 403:
        error_cls: type[DriveGuardError] = (
            QuotaExceededError if _is_quota_reason(info.reason) else PermissionError
        )
    else:
        error_cls = _STATUS_ERRORS.get(info.status_code, ApiError)
    return error_cls(message, details=details, cause=cause)
