"""Notes API endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends

from ..core.schemas.notes import NoteCreate, NoteDeleteResponse, NoteResponse, NoteUpdate
from ..core.services import NoteService
from ..middleware.auth import get_current_user_id
from .dependencies import get_note_service

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("", response_model=List[NoteResponse])
async def list_notes(
    current_user_id: UUID = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """List all notes of the current user."""
    return await note_service.list_notes(current_user_id)


@router.post("", response_model=NoteResponse, status_code=201)
async def create_note(
    request: NoteCreate,
    current_user_id: UUID = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Create a new note. Auto-sync outcomes are returned in ``sync_results``."""
    return await note_service.create_note(current_user_id, request)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Get a specific note."""
    return await note_service.get_note(note_id, current_user_id)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: UUID,
    request: NoteUpdate,
    current_user_id: UUID = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Update a note."""
    return await note_service.update_note(note_id, current_user_id, request)


@router.delete("/{note_id}", response_model=NoteDeleteResponse)
async def delete_note(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Delete a note and every connection touching it."""
    return await note_service.delete_note(note_id, current_user_id)
