"""Connection repository for database operations."""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import and_, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import StoreError
from ..models.connection import Connection

logger = logging.getLogger(__name__)


class ConnectionRepository:
    """Repository for connection database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_connection(self, connection_data: Dict[str, Any]) -> Connection:
        """Create new connection. No de-duplication of endpoint pairs."""
        connection = Connection(**connection_data)
        self.session.add(connection)
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to create connection: {e}")
            await self.session.rollback()
            raise StoreError("Failed to create connection") from e
        await self.session.refresh(connection)
        return connection

    async def get_by_id_and_user(self, connection_id: UUID, user_id: UUID) -> Optional[Connection]:
        stmt = select(Connection).where(
            and_(Connection.id == connection_id, Connection.owner_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_user_connections(self, user_id: UUID) -> List[Connection]:
        stmt = (
            select(Connection)
            .where(Connection.owner_id == user_id)
            .order_by(Connection.created_at, Connection.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_connection(self, connection_id: UUID, user_id: UUID) -> bool:
        """Delete connection if owned by user."""
        connection = await self.get_by_id_and_user(connection_id, user_id)
        if not connection:
            return False

        try:
            await self.session.delete(connection)
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete connection {connection_id}: {e}")
            await self.session.rollback()
            raise StoreError(f"Failed to delete connection {connection_id}") from e
        return True

    async def delete_all_for_user(self, user_id: UUID) -> int:
        """Remove every connection of the user. No commit."""
        result = await self.session.execute(delete(Connection).where(Connection.owner_id == user_id))
        return result.rowcount or 0
