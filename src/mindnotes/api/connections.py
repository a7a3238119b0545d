"""Connections API endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.common import MessageResponse
from ..core.schemas.connections import ConnectionCreate, ConnectionResponse
from ..core.services import ConnectionService
from ..database import get_db_session
from ..middleware.auth import get_current_user_id

router = APIRouter(prefix="/connections", tags=["connections"])


@router.get("", response_model=List[ConnectionResponse])
async def list_connections(
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    connection_service = ConnectionService(session)
    return await connection_service.list_connections(current_user_id)


@router.post("", response_model=ConnectionResponse, status_code=201)
async def create_connection(
    request: ConnectionCreate,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Link two of the user's notes."""
    connection_service = ConnectionService(session)
    return await connection_service.create_connection(current_user_id, request)


@router.delete("/{connection_id}", response_model=MessageResponse)
async def delete_connection(
    connection_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    connection_service = ConnectionService(session)
    await connection_service.delete_connection(connection_id, current_user_id)
    return MessageResponse(message="Connection deleted successfully")
