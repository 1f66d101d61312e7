"""OAuth client utilities for driveguard."""

from __future__ import annotations

import logging
import os
from typing import Optional, Sequence

from driveguard.errors import AuthError, InvalidArgumentError

from .auth_info import AuthInfo

logger = logging.getLogger(__name__)

# Drive for listing/moving/deleting, Sheets for the report.
# After changing scopes, delete the token file and authorize again.
DEFAULT_SCOPES: tuple[str, ...] = (
    "https://www.googleapis.com/auth/drive",
    "https://www.googleapis.com/auth/spreadsheets",
)


class OAuthClient:
    """Load, refresh and create OAuth credentials; build Google API services."""

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        scopes: Optional[Sequence[str]] = None,
    ) -> None:
        use_scopes = list(scopes) if scopes is not None else list(DEFAULT_SCOPES)
        if not use_scopes or not all(isinstance(s, str) and s.strip() for s in use_scopes):
            raise InvalidArgumentError("scopes must be a non-empty sequence of strings")
        self._auth_info = auth_info
        self._scopes = use_scopes
        self._creds = None

    @property
    def scopes(self) -> list[str]:
        return list(self._scopes)

    def has_token(self) -> bool:
        return os.path.exists(self._auth_info.token_file)

    def load_credentials(self, ensure_valid: bool = True):
        """
        Load credentials from the token file.

        Returns:
            google.oauth2.credentials.Credentials, or None if no token file exists.

        Raises:
            AuthError: on load/refresh failures.
        """
        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials

        token_file = self._auth_info.token_file
        if not os.path.exists(token_file):
            return None

        try:
            creds = Credentials.from_authorized_user_file(token_file, scopes=self._scopes)
        except Exception as exc:
            raise AuthError(
                "Failed to load token_file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc

        if ensure_valid and not creds.valid and creds.refresh_token:
            try:
                creds.refresh(Request())
            except Exception as exc:
                raise AuthError(
                    "Failed to refresh OAuth credentials",
                    details={"token_file": token_file},
                    cause=exc,
                ) from exc
            self._save_credentials(creds)

        self._creds = creds
        logger.info("OAuth tokens loaded successfully")
        return creds

    def authorize(self, port: int = 0):
        """Run the installed-app consent flow and persist the resulting token."""
        from google_auth_oauthlib.flow import InstalledAppFlow

        client_secrets = self._auth_info.client_secrets_file
        try:
            flow = InstalledAppFlow.from_client_secrets_file(client_secrets, scopes=self._scopes)
            creds = flow.run_local_server(port=port, access_type="offline", prompt="consent")
        except Exception as exc:
            raise AuthError(
                "OAuth authorization flow failed",
                details={"client_secrets_file": client_secrets},
                cause=exc,
            ) from exc

        self._save_credentials(creds)
        self._creds = creds
        return creds

    def get_credentials(self):
        """Cached or freshly loaded credentials. Raises AuthError when none exist."""
        if self._creds is None:
            self.load_credentials()
        if self._creds is None:
            raise AuthError(
                "No OAuth token available; authorize first",
                details={"token_file": self._auth_info.token_file},
            )
        return self._creds

    def build_service(self, api: str, version: str):
        """
        Build a Google API service resource (e.g. "drive", "v3").

        Returns:
            googleapiclient.discovery.Resource
        """
        from googleapiclient.discovery import build

        creds = self.get_credentials()
        try:
            return build(api, version, credentials=creds, cache_discovery=False)
        except Exception as exc:
            raise AuthError(f"Failed to build {api} service", cause=exc) from exc

    def _save_credentials(self, creds) -> None:
        token_file = self._auth_info.token_file
        token_dir = os.path.dirname(token_file)
        if token_dir:
            os.makedirs(token_dir, exist_ok=True)

        try:
            with open(token_file, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except OSError as exc:
            raise AuthError(
                "Failed to save OAuth token file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc
        logger.info("OAuth tokens saved successfully")
