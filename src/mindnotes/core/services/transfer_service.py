"""Export and import of a user's note graph."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ..exceptions import NotFoundError, StoreError
from ..models.connection import Connection
from ..models.note import Note
from ..repositories.connection_repository import ConnectionRepository
from ..repositories.note_repository import NoteRepository
from ..repositories.user_repository import UserRepository
from ..schemas.transfer import (
    EXPORT_FORMAT_VERSION,
    ExportDocument,
    ExportedConnection,
    ExportedNote,
    ImportRequest,
    ImportResult,
    SkippedConnection,
)
from .interfaces import ITransferService

logger = logging.getLogger(__name__)


class TransferService(ITransferService):
    """Versioned JSON dump and bulk load."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.connection_repo = ConnectionRepository(session)
        self.user_repo = UserRepository(session)

    async def export_graph(self, user_id: UUID) -> ExportDocument:
        notes = await self.note_repo.list_user_notes(user_id)
        connections = await self.connection_repo.list_user_connections(user_id)
        return ExportDocument(
            notes=[
                ExportedNote(
                    id=str(n.id),
                    title=n.title,
                    content=n.content or "",
                    x=n.x,
                    y=n.y,
                    color=n.color,
                    tags=list(n.tags or []),
                    last_modified=n.last_modified,
                    created_at=n.created_at,
                )
                for n in notes
            ],
            connections=[
                ExportedConnection(
                    id=str(c.id),
                    from_id=str(c.from_note_id),
                    to_id=str(c.to_note_id),
                    created_at=c.created_at,
                )
                for c in connections
            ],
            export_date=datetime.now(timezone.utc),
            version=EXPORT_FORMAT_VERSION,
        )

    async def import_graph(self, user_id: UUID, request: ImportRequest) -> ImportResult:
        """Load notes and connections in a single transaction.

        Every imported note gets a fresh id. Connection endpoints are looked
        up in the client-id mapping first, then among the user's existing
        notes; anything else is skipped and reported.
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        default_color = user.default_color or get_settings().default_note_color

        try:
            if request.clear_existing:
                # connections first, they reference the notes
                removed_connections = await self.connection_repo.delete_all_for_user(user_id)
                removed_notes = await self.note_repo.delete_all_for_user(user_id)
                logger.info(
                    f"Cleared {removed_notes} note(s) and {removed_connections} connection(s) for user {user_id}"
                )

            id_map: Dict[str, UUID] = {}
            now = datetime.now(timezone.utc)
            for item in request.notes:
                new_id = uuid.uuid4()
                if item.id is not None:
                    id_map[item.id] = new_id
                self.session.add(
                    Note(
                        id=new_id,
                        title=item.title,
                        content=item.content,
                        x=item.x,
                        y=item.y,
                        color=item.color or default_color,
                        tags=list(item.tags),
                        owner_id=user_id,
                        created_at=item.created_at or now,
                        last_modified=item.last_modified or now,
                    )
                )
            # Connection has no relationship() to Note, so rows must exist before the FK inserts
            await self.session.flush()

            existing = set()
            if not request.clear_existing:
                parsed = [_parse_uuid(e) for e in self._unmapped_endpoints(request, id_map)]
                candidates = [note_id for note_id in parsed if note_id is not None]
                existing = await self.note_repo.get_owned_ids(user_id, candidates)

            imported_connections = 0
            skipped: List[SkippedConnection] = []
            for item in request.connections:
                from_id = self._resolve(item.from_id, id_map, existing)
                to_id = self._resolve(item.to_id, id_map, existing)
                if from_id is None or to_id is None:
                    unknown = item.from_id if from_id is None else item.to_id
                    skipped.append(
                        SkippedConnection(from_id=item.from_id, to_id=item.to_id, reason=f"Unknown note {unknown}")
                    )
                    continue
                self.session.add(Connection(from_note_id=from_id, to_note_id=to_id, owner_id=user_id))
                imported_connections += 1

            await self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Import failed for user {user_id}: {e}")
            await self.session.rollback()
            raise StoreError("Failed to import notes") from e

        if skipped:
            logger.warning(f"Import for user {user_id} skipped {len(skipped)} connection(s)")
        logger.info(
            f"Imported {len(request.notes)} note(s) and {imported_connections} connection(s) for user {user_id}"
        )
        return ImportResult(
            imported_notes=len(request.notes),
            imported_connections=imported_connections,
            skipped_connections=skipped,
        )

    @staticmethod
    def _unmapped_endpoints(request: ImportRequest, id_map: Dict[str, UUID]) -> set:
        endpoints = set()
        for item in request.connections:
            for endpoint in (item.from_id, item.to_id):
                if endpoint not in id_map:
                    endpoints.add(endpoint)
        return endpoints

    @staticmethod
    def _resolve(endpoint: str, id_map: Dict[str, UUID], existing: set) -> Optional[UUID]:
        if endpoint in id_map:
            return id_map[endpoint]
        parsed = _parse_uuid(endpoint)
        if parsed is not None and parsed in existing:
            return parsed
        return None


def _parse_uuid(value: str) -> Optional[UUID]:
    try:
        return UUID(str(value))
    except ValueError:
        return None
