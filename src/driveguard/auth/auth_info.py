"""OAuth file locations for driveguard."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class AuthInfo:
    """
    Where OAuth material lives.

    Attributes:
        client_secrets_file: OAuth client secrets JSON (installed-app client).
        token_file: Authorized-user token JSON, written after authorization.
    """

    client_secrets_file: str
    token_file: str

    def __post_init__(self) -> None:
        for key in ("client_secrets_file", "token_file"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"AuthInfo.{key} must be a non-empty string")
