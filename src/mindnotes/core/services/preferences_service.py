"""User sync preferences."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundError
from ..repositories.user_repository import UserRepository
from ..schemas.users import PreferencesResponse, PreferencesUpdate
from .interfaces import IPreferencesService

logger = logging.getLogger(__name__)


class PreferencesService(IPreferencesService):
    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)

    async def get_preferences(self, user_id: UUID) -> PreferencesResponse:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return PreferencesResponse.model_validate(user)

    async def update_preferences(self, user_id: UUID, request: PreferencesUpdate) -> PreferencesResponse:
        """Field-level overwrite; omitted fields keep their value."""
        user = await self.user_repo.update_user(user_id, request.model_dump(exclude_unset=True))
        if not user:
            raise NotFoundError("User not found")
        logger.info(f"Updated preferences for user {user_id}")
        return PreferencesResponse.model_validate(user)
