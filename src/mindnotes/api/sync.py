"""Batch mirror endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends

from ..core.schemas.sync import GitHubSyncRequest, SyncReport
from ..core.services import SyncService
from ..middleware.auth import get_current_user_id
from .dependencies import get_sync_service

router = APIRouter(prefix="/sync", tags=["sync"])


@router.post("/drive", response_model=SyncReport)
async def sync_drive(
    current_user_id: UUID = Depends(get_current_user_id),
    sync_service: SyncService = Depends(get_sync_service),
):
    """Mirror every note to Google Drive. Per-note failures are listed in the report."""
    return await sync_service.sync_all(current_user_id, "drive")


@router.post("/github", response_model=SyncReport)
async def sync_github(
    request: Optional[GitHubSyncRequest] = Body(default=None),
    current_user_id: UUID = Depends(get_current_user_id),
    sync_service: SyncService = Depends(get_sync_service),
):
    """Commit every note to GitHub; the stored default repository is used when none is given."""
    request = request or GitHubSyncRequest()
    return await sync_service.sync_all(current_user_id, "github", owner=request.owner, repo=request.repo)
