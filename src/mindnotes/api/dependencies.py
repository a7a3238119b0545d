"""Per-request wiring of outbound clients and composed services."""

from typing import AsyncIterator

import httpx
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..core.mirrors import DriveAdapter, GitHubAdapter
from ..core.redis_client import RedisClient, get_redis_client
from ..core.services import CredentialService, NoteService, SyncService
from ..database import get_db_session
from ..security.google_oauth import GoogleOAuthClient


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """One outbound HTTP client per request, closed when the response is sent."""
    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
        yield client


def get_drive_adapter(http: httpx.AsyncClient = Depends(get_http_client)) -> DriveAdapter:
    settings = get_settings()
    return DriveAdapter(
        http,
        api_url=settings.drive_api_url,
        upload_url=settings.drive_upload_url,
        folder_id=settings.drive_folder_id,
    )


def get_github_adapter(http: httpx.AsyncClient = Depends(get_http_client)) -> GitHubAdapter:
    return GitHubAdapter(http, api_url=get_settings().github_api_url)


def get_oauth_client(http: httpx.AsyncClient = Depends(get_http_client)) -> GoogleOAuthClient:
    return GoogleOAuthClient(http, get_settings())


def get_credential_service(
    session: AsyncSession = Depends(get_db_session),
    oauth_client: GoogleOAuthClient = Depends(get_oauth_client),
    redis_client: RedisClient = Depends(get_redis_client),
) -> CredentialService:
    return CredentialService(session, oauth_client=oauth_client, state_store=redis_client)


def get_sync_service(
    session: AsyncSession = Depends(get_db_session),
    credentials: CredentialService = Depends(get_credential_service),
    drive: DriveAdapter = Depends(get_drive_adapter),
    github: GitHubAdapter = Depends(get_github_adapter),
) -> SyncService:
    return SyncService(session, credentials, drive, github)


def get_note_service(
    session: AsyncSession = Depends(get_db_session),
    sync_service: SyncService = Depends(get_sync_service),
) -> NoteService:
    return NoteService(session, sync_service=sync_service)
