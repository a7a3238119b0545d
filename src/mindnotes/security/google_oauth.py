"""Google OAuth2 client: consent URL, code exchange and token refresh."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import urlencode

import httpx

from ..config import Settings
from ..core.exceptions import CredentialRefreshError, ExternalApiError, NotConfiguredError

logger = logging.getLogger(__name__)

DRIVE_SCOPES = (
    "https://www.googleapis.com/auth/drive.file",
    "https://www.googleapis.com/auth/userinfo.email",
)


@dataclass
class GoogleToken:
    access_token: str
    expires_at: datetime
    refresh_token: Optional[str] = None


class GoogleOAuthClient:
    """Thin wrapper over Google's OAuth2 endpoints."""

    def __init__(self, http: httpx.AsyncClient, settings: Settings):
        self.http = http
        self.settings = settings

    def _require_configured(self) -> None:
        if not self.settings.google_oauth_configured:
            raise NotConfiguredError(
                "Google OAuth is not configured. Set GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET."
            )

    def authorization_url(self, state: str) -> str:
        """Consent screen URL; ``offline`` access so a refresh token is issued."""
        self._require_configured()
        params = {
            "client_id": self.settings.google_client_id,
            "redirect_uri": self.settings.google_redirect_uri,
            "response_type": "code",
            "scope": " ".join(DRIVE_SCOPES),
            "access_type": "offline",
            "prompt": "consent",
            "state": state,
        }
        return f"{self.settings.google_auth_uri}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> GoogleToken:
        """Trade an authorization code for tokens."""
        self._require_configured()
        try:
            response = await self.http.post(
                self.settings.google_token_uri,
                data={
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": self.settings.google_redirect_uri,
                    "client_id": self.settings.google_client_id,
                    "client_secret": self.settings.google_client_secret,
                },
            )
        except httpx.HTTPError as e:
            raise ExternalApiError("drive", f"Token exchange failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Token exchange failed: {response.status_code} {response.text}")
            raise ExternalApiError(
                "drive", "Failed to exchange authorization code for token", response.status_code
            )
        try:
            return self._parse_token(response.json())
        except (ValueError, KeyError) as e:
            raise ExternalApiError("drive", "No access token in response") from e

    async def refresh(self, refresh_token: str) -> GoogleToken:
        """Get a fresh access token. Raises CredentialRefreshError on any failure."""
        if not refresh_token:
            raise CredentialRefreshError("drive", "No refresh token stored for Google Drive")
        try:
            self._require_configured()
            response = await self.http.post(
                self.settings.google_token_uri,
                data={
                    "grant_type": "refresh_token",
                    "refresh_token": refresh_token,
                    "client_id": self.settings.google_client_id,
                    "client_secret": self.settings.google_client_secret,
                },
            )
        except (httpx.HTTPError, NotConfiguredError) as e:
            raise CredentialRefreshError("drive", f"Google token refresh failed: {e}") from e

        if response.status_code != 200:
            logger.warning(f"Google token refresh rejected: {response.status_code}")
            raise CredentialRefreshError(
                "drive", f"Google token refresh failed with status {response.status_code}"
            )
        try:
            return self._parse_token(response.json())
        except (ValueError, KeyError) as e:
            raise CredentialRefreshError("drive", "Malformed token refresh response") from e

    @staticmethod
    def _parse_token(data: dict) -> GoogleToken:
        access_token = data.get("access_token")
        if not access_token:
            raise ValueError("No access token in response")
        expires_in = int(data.get("expires_in", 3600))
        return GoogleToken(
            access_token=access_token,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=expires_in),
            refresh_token=data.get("refresh_token"),
        )
