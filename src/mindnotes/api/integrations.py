"""Provider connection flows: Google OAuth consent and GitHub token submission."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse

from ..config import get_settings
from ..core.exceptions import MindNotesError
from ..core.mirrors import GitHubAdapter
from ..core.schemas.users import GitHubConnectRequest, GitHubConnectResponse, GoogleAuthorizationResponse
from ..core.services import CredentialService
from ..middleware.auth import get_current_user_id
from .dependencies import get_credential_service, get_github_adapter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["integrations"])


@router.get("/google", response_model=GoogleAuthorizationResponse)
async def google_authorize(
    current_user_id: UUID = Depends(get_current_user_id),
    credential_service: CredentialService = Depends(get_credential_service),
):
    """Consent URL for connecting Google Drive."""
    url = await credential_service.build_google_authorization_url(current_user_id)
    return GoogleAuthorizationResponse(authorization_url=url)


@router.get("/google/callback")
async def google_callback(
    code: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None),
    error: Optional[str] = Query(default=None),
    credential_service: CredentialService = Depends(get_credential_service),
):
    """Google redirects here after consent; the browser is sent back to the frontend."""
    frontend = get_settings().frontend_url.rstrip("/")
    failure = RedirectResponse(f"{frontend}/dashboard?error=google_auth_failed", status_code=302)

    if error:
        logger.warning(f"Google authorization denied: {error}")
        return failure
    try:
        await credential_service.complete_google_authorization(code, state)
    except MindNotesError as e:
        logger.warning(f"Google authorization failed: {e.message}")
        return failure
    return RedirectResponse(f"{frontend}/dashboard?google_connected=true", status_code=302)


@router.post("/github", response_model=GitHubConnectResponse)
async def github_connect(
    request: GitHubConnectRequest,
    current_user_id: UUID = Depends(get_current_user_id),
    credential_service: CredentialService = Depends(get_credential_service),
    github: GitHubAdapter = Depends(get_github_adapter),
):
    """Store a GitHub token (and optional default repository) after checking it."""
    login = await credential_service.connect_github(
        current_user_id, request.token, github, owner=request.owner, repo=request.repo
    )
    return GitHubConnectResponse(message="GitHub connected successfully", github_user=login)
