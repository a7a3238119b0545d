"""Export/import API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.transfer import ExportDocument, ImportRequest, ImportResult
from ..core.services import TransferService
from ..database import get_db_session
from ..middleware.auth import get_current_user_id

router = APIRouter(tags=["transfer"])


@router.post("/export", response_model=ExportDocument)
async def export_notes(
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Dump all notes and connections as a versioned document."""
    transfer_service = TransferService(session)
    return await transfer_service.export_graph(current_user_id)


@router.post("/import", response_model=ImportResult)
async def import_notes(
    request: ImportRequest,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Load a previous export; connection endpoints are remapped to the new note ids."""
    transfer_service = TransferService(session)
    return await transfer_service.import_graph(current_user_id, request)
