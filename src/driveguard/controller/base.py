"""Request execution shared by the Google API controllers (internal use only)."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterator, TypeVar

from driveguard.errors import (
    ApiError,
    DriveGuardError,
    HttpErrorInfo,
    NetworkError,
    RateLimitError,
    map_http_error,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0

    def delays(self) -> Iterator[float]:
        """Backoff before each retry: 1s, 2s, 4s, ..."""
        delay = self.initial_delay_sec
        for _ in range(self.max_retries):
            yield delay
            delay *= 2


class GoogleApiController:
    """
    Base for the Drive and Sheets controllers.

    `_execute` runs a request callable, retries transient failures with
    exponential backoff and raises driveguard errors only.
    """

    _retry_policy: _RetryPolicy = _RetryPolicy()

    def _execute(self, func: Callable[[], T]) -> T:
        backoff = self._retry_policy.delays()
        while True:
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                delay = next(backoff, None) if self._should_retry(mapped) else None
                if delay is None:
                    raise mapped from exc
                logger.warning("Retrying Google API call in %.1fs: %s", delay, mapped)
                time.sleep(delay)

    def _should_retry(self, exc: DriveGuardError) -> bool:
        if isinstance(exc, (RateLimitError, NetworkError)):
            return True
        status_code = exc.details.get("status_code")
        return isinstance(exc, ApiError) and isinstance(status_code, int) and status_code >= 500

    def _map_exception(self, exc: Exception) -> DriveGuardError:
        from googleapiclient.errors import HttpError

        if isinstance(exc, DriveGuardError):
            return exc
        if isinstance(exc, HttpError):
            return map_http_error(_http_error_to_info(exc), cause=exc)
        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)
        return ApiError("Google API error", cause=exc)


def _error_body(content: Any) -> dict[str, Any]:
    """The `error` object of a Google JSON error response, or {}."""
    if not isinstance(content, (bytes, bytearray)):
        return {}
    try:
        payload = json.loads(content.decode("utf-8"))
    except ValueError:
        return {}
    body = payload.get("error") if isinstance(payload, dict) else None
    return body if isinstance(body, dict) else {}


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    resp = getattr(exc, "resp", None)
    status_code = getattr(resp, "status", None)
    reason = getattr(resp, "reason", None)

    body = _error_body(getattr(exc, "content", None))
    details: dict[str, Any] = {}
    first = (body.get("errors") or [None])[0]
    if isinstance(first, dict):
        details["domain"] = first.get("domain")
        details["reason_detail"] = first.get("reason")
        # The per-error reason (e.g. "storageQuotaExceeded") beats the HTTP phrase.
        if isinstance(first.get("reason"), str):
            reason = first["reason"]

    return HttpErrorInfo(
        status_code=status_code if isinstance(status_code, int) else 0,
        reason=reason if isinstance(reason, str) else None,
        message=body.get("message") or None,
        details=details or None,
    )
