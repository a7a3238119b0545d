"""Connection service implementation."""

import logging
from typing import List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundError, ValidationError
from ..repositories.connection_repository import ConnectionRepository
from ..repositories.note_repository import NoteRepository
from ..schemas.connections import ConnectionCreate, ConnectionResponse
from .interfaces import IConnectionService

logger = logging.getLogger(__name__)


class ConnectionService(IConnectionService):
    """Undirected links between two notes of the same owner."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.connection_repo = ConnectionRepository(session)
        # Used to check both endpoints before linking them
        self.note_repo = NoteRepository(session)

    async def list_connections(self, user_id: UUID) -> List[ConnectionResponse]:
        connections = await self.connection_repo.list_user_connections(user_id)
        return [ConnectionResponse.from_model(c) for c in connections]

    async def create_connection(self, user_id: UUID, request: ConnectionCreate) -> ConnectionResponse:
        """Link two notes. Self-loops and repeated pairs are allowed."""
        endpoints = {request.from_note_id, request.to_note_id}
        owned = await self.note_repo.get_owned_ids(user_id, list(endpoints))
        missing = endpoints - owned
        if missing:
            raise ValidationError(
                "Connection endpoints must be existing notes",
                {"missing": sorted(str(note_id) for note_id in missing)},
            )

        connection = await self.connection_repo.create_connection(
            {
                "from_note_id": request.from_note_id,
                "to_note_id": request.to_note_id,
                "owner_id": user_id,
            }
        )
        logger.info(f"Connected {request.from_note_id} -> {request.to_note_id} for user {user_id}")
        return ConnectionResponse.from_model(connection)

    async def delete_connection(self, connection_id: UUID, user_id: UUID) -> None:
        if not await self.connection_repo.delete_connection(connection_id, user_id):
            raise NotFoundError("Connection not found")
