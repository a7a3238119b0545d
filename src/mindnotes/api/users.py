"""User preferences and integration status."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.users import IntegrationStatus, PreferencesResponse, PreferencesUpdate
from ..core.services import CredentialService, PreferencesService
from ..database import get_db_session
from ..middleware.auth import get_current_user_id

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/preferences", response_model=PreferencesResponse)
async def get_preferences(
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    preferences_service = PreferencesService(session)
    return await preferences_service.get_preferences(current_user_id)


@router.put("/preferences", response_model=PreferencesResponse)
async def update_preferences(
    request: PreferencesUpdate,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Update sync preferences; omitted fields are left unchanged."""
    preferences_service = PreferencesService(session)
    return await preferences_service.update_preferences(current_user_id, request)


@router.get("/integrations", response_model=IntegrationStatus)
async def get_integrations(
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Which providers are connected."""
    credential_service = CredentialService(session)
    return await credential_service.get_integration_status(current_user_id)
