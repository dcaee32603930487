"""
Scriblink Backend — Notes Route Handlers
==========================================

What:  CRUD for notes, plus moving a note between folders.
How:   Handlers delegate to WorkspaceService so creation places the note in a
       folder and deletion cascades to folder membership, tags and summary.

Caching:
    Notes are editable, so responses carry `Cache-Control: no-store`.
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from scriblink.database import get_db_session
from scriblink.routes.deps import get_current_user
from scriblink.schemas.common import ErrorResponse, SuccessResponse
from scriblink.schemas.note import (
    CreateNoteRequest,
    MoveNoteRequest,
    NoteListResponse,
    NoteResponse,
    SetTitleRequest,
    UpdateContentRequest,
)
from scriblink.schemas.tag import TagRef
from scriblink.services.note_service import note_service
from scriblink.services.workspace_service import workspace_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notes", tags=["Notes"])

_NOTE_ERRORS = {
    403: {"description": "Note owned by another user", "model": ErrorResponse},
    404: {"description": "Note not found", "model": ErrorResponse},
}


@router.post(
    "",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_NOTE_ERRORS,
    summary="Create a note in a folder (root by default)",
)
async def create_note(
    body: CreateNoteRequest,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await workspace_service.create_note(
        db, user, title=body.title, content=body.content, folder=body.folder
    )


@router.get(
    "",
    response_model=NoteListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List the user's notes, most recently modified first",
)
async def list_notes(
    response: Response,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteListResponse:
    result = await note_service.list_notes(db, user)
    # Same convention as the GitHub/GitLab list APIs
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.get("/{note_id}", response_model=NoteResponse, responses=_NOTE_ERRORS)
async def get_note(
    note_id: str,
    response: Response,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    result = await note_service.get_note(db, note_id, user)
    response.headers["Cache-Control"] = "no-store"
    return result


@router.put("/{note_id}/title", response_model=NoteResponse, responses=_NOTE_ERRORS)
async def set_title(
    note_id: str,
    body: SetTitleRequest,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.set_title(db, note_id, user, body.title)


@router.put("/{note_id}/content", response_model=NoteResponse, responses=_NOTE_ERRORS)
async def update_content(
    note_id: str,
    body: UpdateContentRequest,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_content(db, note_id, user, body.content)


@router.post("/{note_id}/move", response_model=SuccessResponse, responses=_NOTE_ERRORS)
async def move_note(
    note_id: str,
    body: MoveNoteRequest,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await workspace_service.move_note(db, user, note_id, body.folder)
    return SuccessResponse()


@router.get("/{note_id}/tags", response_model=list[TagRef], responses=_NOTE_ERRORS)
async def get_note_tags(
    note_id: str,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> list[TagRef]:
    return await workspace_service.get_tags_for_note(db, user, note_id)


@router.delete(
    "/{note_id}",
    response_model=SuccessResponse,
    responses=_NOTE_ERRORS,
    summary="Delete a note with its folder membership, tags and summary",
)
async def delete_note(
    note_id: str,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await workspace_service.delete_note(db, user, note_id)
    return SuccessResponse()
