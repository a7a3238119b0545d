"""Note service implementation."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ..exceptions import NotFoundError
from ..mirrors.base import NoteSnapshot
from ..models.note import Note
from ..repositories.note_repository import NoteRepository
from ..repositories.user_repository import UserRepository
from ..schemas.notes import NoteCreate, NoteDeleteResponse, NoteResponse, NoteUpdate
from ..schemas.sync import SyncItemResult
from .interfaces import INoteService
from .sync_service import SyncService

logger = logging.getLogger(__name__)


class NoteService(INoteService):
    """Note service implementation."""

    def __init__(self, session: AsyncSession, sync_service: Optional[SyncService] = None):
        self.session = session
        self.note_repo = NoteRepository(session)
        # Used for the owner's default color
        self.user_repo = UserRepository(session)
        # Without it notes are saved but never auto-synced
        self.sync_service = sync_service

    async def list_notes(self, user_id: UUID) -> List[NoteResponse]:
        notes = await self.note_repo.list_user_notes(user_id)
        return [NoteResponse.model_validate(note) for note in notes]

    async def get_note(self, note_id: UUID, user_id: UUID) -> NoteResponse:
        note = await self.note_repo.get_by_id_and_user(note_id, user_id)
        if not note:
            raise NotFoundError("Note not found")
        return NoteResponse.model_validate(note)

    async def create_note(self, user_id: UUID, request: NoteCreate) -> NoteResponse:
        """Create new note, then mirror it according to the user's preferences."""
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        note = await self.note_repo.create_note(
            {
                "title": request.title,
                "content": request.content,
                "x": request.x,
                "y": request.y,
                "color": request.color or user.default_color or get_settings().default_note_color,
                "tags": list(request.tags),
                "owner_id": user_id,
            }
        )
        logger.info(f"Created note {note.id} for user {user_id}")

        sync_results = await self._auto_sync(user_id, note)
        return self._to_response(note, sync_results)

    async def update_note(self, note_id: UUID, user_id: UUID, request: NoteUpdate) -> NoteResponse:
        """Overwrite the fields that were sent. An empty body still bumps last_modified."""
        note = await self.note_repo.update_note(note_id, user_id, request.changes())
        if not note:
            raise NotFoundError("Note not found")

        sync_results = await self._auto_sync(user_id, note)
        return self._to_response(note, sync_results)

    async def delete_note(self, note_id: UUID, user_id: UUID) -> NoteDeleteResponse:
        """Delete note and its connections, then drop the Drive copy if there is one."""
        note = await self.note_repo.get_by_id_and_user(note_id, user_id)
        if not note:
            raise NotFoundError("Note not found")
        snapshot = NoteSnapshot.from_model(note)

        removed = await self.note_repo.delete_note(note_id, user_id)
        if removed is None:
            raise NotFoundError("Note not found")

        sync_results = None
        if self.sync_service is not None:
            sync_results = await self.sync_service.remove_note_mirror(user_id, snapshot) or None

        return NoteDeleteResponse(
            message="Note deleted successfully",
            note_id=note_id,
            removed_connections=removed,
            sync_results=sync_results,
        )

    async def _auto_sync(self, user_id: UUID, note: Note) -> Optional[List[SyncItemResult]]:
        if self.sync_service is None:
            return None
        return await self.sync_service.sync_note(user_id, note) or None

    @staticmethod
    def _to_response(note: Note, sync_results: Optional[List[SyncItemResult]]) -> NoteResponse:
        response = NoteResponse.model_validate(note)
        response.sync_results = sync_results
        return response
