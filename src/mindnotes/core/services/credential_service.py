"""Provider credentials: lookup, Drive refresh and the connect flows."""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import Settings, get_settings
from ...security.google_oauth import GoogleOAuthClient
from ..exceptions import (
    CredentialRefreshError,
    ExternalApiError,
    NotConnectedError,
    NotFoundError,
    ValidationError,
)
from ..mirrors.base import DriveCredential, GitHubCredential
from ..mirrors.github import GitHubAdapter
from ..models.user import User
from ..redis_client import RedisClient
from ..repositories.user_repository import UserRepository
from ..schemas.users import IntegrationStatus
from .interfaces import ICredentialService

logger = logging.getLogger(__name__)

Credential = Union[DriveCredential, GitHubCredential]


class CredentialService(ICredentialService):
    """Reads and stores the provider credentials kept on the user row."""

    def __init__(
        self,
        session: AsyncSession,
        oauth_client: Optional[GoogleOAuthClient] = None,
        state_store: Optional[RedisClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.session = session
        self.user_repo = UserRepository(session)
        self.oauth_client = oauth_client
        self.state_store = state_store
        self.settings = settings or get_settings()

    async def get_credential(self, user_id: UUID, provider: str) -> Credential:
        if provider == "drive":
            return await self.get_drive_credential(user_id)
        if provider == "github":
            return await self.get_github_credential(user_id)
        raise ValidationError(f"Unknown provider: {provider}")

    async def get_drive_credential(self, user_id: UUID) -> DriveCredential:
        """Drive credential, refreshed first when it expires within the leeway.

        A failed refresh raises CredentialRefreshError and leaves the stored
        credential untouched.
        """
        user = await self._get_user(user_id)
        if not user.drive_connected:
            raise NotConnectedError("drive")

        credential = DriveCredential(
            access_token=user.drive_access_token,
            refresh_token=user.drive_refresh_token,
            expires_at=user.drive_token_expires_at,
        )
        if not self._needs_refresh(credential):
            return credential

        if self.oauth_client is None:
            raise CredentialRefreshError("drive", "Google Drive token expired and cannot be refreshed")
        token = await self.oauth_client.refresh(credential.refresh_token)

        update = {
            "drive_access_token": token.access_token,
            "drive_token_expires_at": token.expires_at,
        }
        # Google only sometimes rotates the refresh token
        if token.refresh_token:
            update["drive_refresh_token"] = token.refresh_token
        await self.user_repo.update_user(user_id, update)
        logger.info(f"Refreshed Google Drive token for user {user_id}")

        return DriveCredential(
            access_token=token.access_token,
            refresh_token=token.refresh_token or credential.refresh_token,
            expires_at=token.expires_at,
        )

    async def get_github_credential(self, user_id: UUID) -> GitHubCredential:
        user = await self._get_user(user_id)
        if not user.github_connected:
            raise NotConnectedError("github")
        return GitHubCredential(token=user.github_token, owner=user.github_owner, repo=user.github_repo)

    def _needs_refresh(self, credential: DriveCredential) -> bool:
        if credential.expires_at is None:
            return False
        leeway = timedelta(seconds=self.settings.drive_refresh_leeway_seconds)
        return credential.expires_at <= datetime.now(timezone.utc) + leeway

    # Google OAuth consent flow

    async def build_google_authorization_url(self, user_id: UUID) -> str:
        """Consent URL carrying a one-time state bound to the user."""
        if self.oauth_client is None or self.state_store is None:
            raise RuntimeError("Google authorization needs an OAuth client and a state store")

        state = secrets.token_urlsafe(32)
        url = self.oauth_client.authorization_url(state)
        stored = await self.state_store.store_oauth_state(
            state, user_id, self.settings.oauth_state_ttl_seconds
        )
        if not stored:
            raise ExternalApiError("drive", "Could not start Google authorization, state store unavailable")
        return url

    async def complete_google_authorization(self, code: str, state: str) -> UUID:
        """Exchange the code and store the Drive credential. Returns the user id."""
        if self.oauth_client is None or self.state_store is None:
            raise RuntimeError("Google authorization needs an OAuth client and a state store")
        if not code or not state:
            raise ValidationError("Missing code or state")

        user_id = await self.state_store.consume_oauth_state(state)
        if user_id is None:
            raise ValidationError("Invalid or expired OAuth state")

        token = await self.oauth_client.exchange_code(code)
        update = {
            "drive_access_token": token.access_token,
            "drive_token_expires_at": token.expires_at,
        }
        if token.refresh_token:
            update["drive_refresh_token"] = token.refresh_token

        user = await self.user_repo.update_user(user_id, update)
        if user is None:
            raise NotFoundError("User not found")
        logger.info(f"Google Drive connected for user {user_id}")
        return user_id

    # GitHub

    async def connect_github(
        self,
        user_id: UUID,
        token: str,
        github: GitHubAdapter,
        owner: Optional[str] = None,
        repo: Optional[str] = None,
    ) -> str:
        """Verify the token against GitHub and store it. Returns the GitHub login."""
        await self._get_user(user_id)
        try:
            login = await github.get_authenticated_login(token)
        except ExternalApiError as e:
            logger.warning(f"GitHub token rejected for user {user_id}: {e.message}")
            raise ValidationError("Invalid GitHub token") from e

        update = {"github_token": token}
        if owner is not None:
            update["github_owner"] = owner
        if repo is not None:
            update["github_repo"] = repo
        await self.user_repo.update_user(user_id, update)
        logger.info(f"GitHub connected for user {user_id} as {login}")
        return login

    async def get_integration_status(self, user_id: UUID) -> IntegrationStatus:
        user = await self._get_user(user_id)
        return IntegrationStatus(
            drive_connected=user.drive_connected,
            drive_token_expires_at=user.drive_token_expires_at,
            github_connected=user.github_connected,
            github_owner=user.github_owner,
            github_repo=user.github_repo,
        )

    async def _get_user(self, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user
