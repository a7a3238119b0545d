"""Note repository for database operations."""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import StoreError
from ..models.connection import Connection
from ..models.note import Note

logger = logging.getLogger(__name__)

# fields a caller may overwrite; everything else is managed here
UPDATABLE_FIELDS = frozenset({"title", "content", "x", "y", "color", "tags"})


class NoteRepository:
    """Repository for note database operations. Every query is owner-scoped."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_note(self, note_data: Dict[str, Any]) -> Note:
        """Create new note."""
        note = Note(**note_data)
        self.session.add(note)
        await self._commit("create note")
        await self.session.refresh(note)
        return note

    async def get_by_id_and_user(self, note_id: UUID, user_id: UUID) -> Optional[Note]:
        """Get note by ID if owned by user."""
        stmt = select(Note).where(and_(Note.id == note_id, Note.owner_id == user_id))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_user_notes(self, user_id: UUID) -> List[Note]:
        """All notes of the user, oldest first."""
        stmt = select(Note).where(Note.owner_id == user_id).order_by(Note.created_at, Note.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_owned_ids(self, user_id: UUID, note_ids: List[UUID]) -> set[UUID]:
        """Subset of ``note_ids`` that exist and belong to the user."""
        if not note_ids:
            return set()
        stmt = select(Note.id).where(and_(Note.owner_id == user_id, Note.id.in_(note_ids)))
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def update_note(self, note_id: UUID, user_id: UUID, update_data: Dict[str, Any]) -> Optional[Note]:
        """Overwrite the given fields and bump last_modified, even for an empty update."""
        note = await self.get_by_id_and_user(note_id, user_id)
        if not note:
            return None

        for key, value in update_data.items():
            if key in UPDATABLE_FIELDS:
                setattr(note, key, value)
        note.touch()

        await self._commit("update note")
        await self.session.refresh(note)
        return note

    async def set_mirror_reference(
        self,
        note_id: UUID,
        user_id: UUID,
        drive_file_id: Optional[str] = None,
        github_path: Optional[str] = None,
    ) -> Optional[Note]:
        """Record where a note was mirrored. Does not count as a user edit."""
        note = await self.get_by_id_and_user(note_id, user_id)
        if not note:
            return None
        if drive_file_id is not None:
            note.drive_file_id = drive_file_id
        if github_path is not None:
            note.github_path = github_path
        await self._commit("record mirror reference")
        return note

    async def delete_note(self, note_id: UUID, user_id: UUID) -> Optional[int]:
        """Delete note and every connection touching it in one transaction.

        Returns the number of pruned connections, or None when the note
        does not exist for this user.
        """
        note = await self.get_by_id_and_user(note_id, user_id)
        if not note:
            logger.warning(f"Note {note_id} not found or not owned by user {user_id}")
            return None

        try:
            prune = delete(Connection).where(
                and_(
                    Connection.owner_id == user_id,
                    or_(Connection.from_note_id == note_id, Connection.to_note_id == note_id),
                )
            )
            result = await self.session.execute(prune)
            removed = result.rowcount or 0

            await self.session.delete(note)
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete note {note_id}: {e}")
            await self.session.rollback()
            raise StoreError(f"Failed to delete note {note_id}") from e

        logger.info(f"Deleted note {note_id} and {removed} connection(s)")
        return removed

    async def delete_all_for_user(self, user_id: UUID) -> int:
        """Remove every note of the user (connections must be gone already). No commit."""
        result = await self.session.execute(delete(Note).where(Note.owner_id == user_id))
        return result.rowcount or 0

    async def _commit(self, action: str) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to {action}: {e}")
            await self.session.rollback()
            raise StoreError(f"Failed to {action}") from e
