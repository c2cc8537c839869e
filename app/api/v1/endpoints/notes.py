"""Note API: standalone CRUD on the caller's notes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_current_user,
    get_note_service,
    get_note_service_for_write,
)
from app.application.dtos.user import AuthenticatedUser
from app.application.use_cases.notes import NoteService
from app.core.limiter import limit_writes
from app.schemas.common import ApiResponse, MessageResponse
from app.schemas.note import NoteCreateRequest, NoteResponse, NoteUpdateRequest

router = APIRouter()

CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]


@router.get("", response_model=ApiResponse[list[NoteResponse]])
async def list_notes(
    user: CurrentUser,
    note_svc: NoteService = Depends(get_note_service),
):
    """The caller's notes, newest first."""
    notes = await note_svc.list_notes(owner_id=user.user_id)
    return ApiResponse(data=[NoteResponse.from_result(n) for n in notes])


@router.post("", response_model=ApiResponse[NoteResponse], status_code=201)
@limit_writes
async def create_note(
    request: Request,
    body: NoteCreateRequest,
    user: CurrentUser,
    note_svc: NoteService = Depends(get_note_service_for_write),
):
    note = await note_svc.create_note(
        owner_id=user.user_id, title=body.title, content=body.content
    )
    return ApiResponse(message="Note created successfully", data=NoteResponse.from_result(note))


@router.get("/{note_id}", response_model=ApiResponse[NoteResponse])
async def get_note(
    note_id: str,
    user: CurrentUser,
    note_svc: NoteService = Depends(get_note_service),
):
    note = await note_svc.get_note(note_id=note_id, owner_id=user.user_id)
    return ApiResponse(data=NoteResponse.from_result(note))


@router.put("/{note_id}", response_model=ApiResponse[NoteResponse])
@limit_writes
async def update_note(
    request: Request,
    note_id: str,
    body: NoteUpdateRequest,
    user: CurrentUser,
    note_svc: NoteService = Depends(get_note_service_for_write),
):
    note = await note_svc.update_note(
        note_id=note_id, owner_id=user.user_id, title=body.title, content=body.content
    )
    return ApiResponse(message="Note updated successfully", data=NoteResponse.from_result(note))


@router.delete("/{note_id}", response_model=MessageResponse)
@limit_writes
async def delete_note(
    request: Request,
    note_id: str,
    user: CurrentUser,
    note_svc: NoteService = Depends(get_note_service_for_write),
):
    """Delete a note. Case attachments that referenced it are left in place."""
    await note_svc.delete_note(note_id=note_id, owner_id=user.user_id)
    return MessageResponse(message="Note deleted successfully")
