"""Environment-driven configuration.

Settings come from process environment variables, optionally seeded from a
``.env`` file in the working directory.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from driveguard.auth import AuthInfo
from driveguard.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 15000


def _env_str(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    """Positive integer from env; anything else falls back to default."""
    value = env.get(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", name, value)
        return default
    return parsed if parsed > 0 else default


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    value = env.get(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", name, value)
        return default
    return parsed if parsed >= 0 else default


@dataclass(frozen=True)
class MonitorConfig:
    """Settings for one monitor process."""

    scan_folder_id: str
    quarantine_folder_id: Optional[str] = None
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    sheet_id: Optional[str] = None

    client_secrets_file: str = "client_secrets.json"
    token_file: str = "tokens.json"

    scanning_dwell: tuple[float, float] = (5.0, 15.0)
    pending_dwell: tuple[float, float] = (1.0, 10.0)

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.scan_folder_id:
            raise InvalidArgumentError("SCAN_FOLDER_ID is required")
        if self.poll_interval_ms <= 0:
            raise InvalidArgumentError(
                "poll interval must be positive",
                details={"poll_interval_ms": self.poll_interval_ms},
            )
        for label, (low, high) in (
            ("scanning_dwell", self.scanning_dwell),
            ("pending_dwell", self.pending_dwell),
        ):
            if low < 0 or high < low:
                raise InvalidArgumentError(
                    f"{label} must satisfy 0 <= min <= max",
                    details={label: (low, high)},
                )

    @property
    def poll_interval(self) -> float:
        """Poll period in seconds."""
        return self.poll_interval_ms / 1000.0

    @property
    def auth_info(self) -> AuthInfo:
        return AuthInfo(
            client_secrets_file=self.client_secrets_file,
            token_file=self.token_file,
        )

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        *,
        dotenv_path: Optional[Path] = None,
    ) -> MonitorConfig:
        """
        Build config from environment variables.

        When env is None, ``.env`` (or dotenv_path) is loaded into os.environ
        first, without overriding variables that are already set.
        """
        if env is None:
            path = dotenv_path or Path.cwd() / ".env"
            if path.exists():
                load_dotenv(path)
            env = os.environ

        scan_folder_id = _env_str(env, "SCAN_FOLDER_ID") or _env_str(env, "GOOGLE_FOLDER_ID")
        if scan_folder_id is None:
            raise InvalidArgumentError("SCAN_FOLDER_ID (or GOOGLE_FOLDER_ID) must be set")

        return cls(
            scan_folder_id=scan_folder_id,
            quarantine_folder_id=_env_str(env, "QUARANTINE_FOLDER_ID"),
            poll_interval_ms=_env_int(env, "POLL_INTERVAL_MS", DEFAULT_POLL_INTERVAL_MS),
            sheet_id=_env_str(env, "SHEET_ID"),
            client_secrets_file=_env_str(env, "GOOGLE_CLIENT_SECRETS_FILE") or "client_secrets.json",
            token_file=_env_str(env, "GOOGLE_TOKEN_FILE") or "tokens.json",
            scanning_dwell=(
                _env_float(env, "SCAN_DWELL_MIN", 5.0),
                _env_float(env, "SCAN_DWELL_MAX", 15.0),
            ),
            pending_dwell=(
                _env_float(env, "PENDING_DWELL_MIN", 1.0),
                _env_float(env, "PENDING_DWELL_MAX", 10.0),
            ),
            log_level=(_env_str(env, "LOG_LEVEL") or "INFO").upper(),
        )
