"""
Scriblink Backend — Folder Route Handlers
===========================================

What:  HTTP surface of the folder hierarchy.
Who:   Called by the frontend sidebar (tree view, drag-and-drop moves).

Error mapping (handlers in main.py):
    NotFoundError              → 404
    PermissionDeniedError      → 403 (folder owned by someone else)
    StructuralViolationError   → 409 (self move, cyclic move, second root)
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from scriblink.database import get_db_session
from scriblink.routes.deps import get_current_user
from scriblink.schemas.common import ErrorResponse
from scriblink.schemas.folder import (
    CreateFolderRequest,
    FolderDeletionResponse,
    FolderListResponse,
    FolderResponse,
    InsertItemRequest,
    MoveFolderRequest,
    ParentResponse,
    RootFolderResponse,
)
from scriblink.services.folder_service import folder_service
from scriblink.services.workspace_service import workspace_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/folders", tags=["Folders"])

_NOT_YOURS = {
    403: {"description": "Folder owned by another user", "model": ErrorResponse},
    404: {"description": "Folder not found", "model": ErrorResponse},
}


@router.get("/root", response_model=RootFolderResponse, summary="Get (or create) the user's root folder")
async def get_root_folder(
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> RootFolderResponse:
    return RootFolderResponse(root_folder=await folder_service.get_root_folder(db, user))


@router.get("", response_model=FolderListResponse, summary="List every folder of the user")
async def list_folders(
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FolderListResponse:
    return FolderListResponse(folders=await folder_service.list_folders(db, user))


@router.post(
    "",
    response_model=FolderResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_NOT_YOURS,
    summary="Create a folder under a parent (root by default)",
)
async def create_folder(
    body: CreateFolderRequest,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FolderResponse:
    return await workspace_service.create_folder(db, user, body.title, body.parent)


@router.get("/{folder_id}", response_model=FolderResponse, responses=_NOT_YOURS)
async def get_folder(
    folder_id: str,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FolderResponse:
    return await workspace_service.get_folder(db, user, folder_id)


@router.get("/{folder_id}/parent", response_model=ParentResponse, responses=_NOT_YOURS)
async def get_parent(
    folder_id: str,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ParentResponse:
    parent = await workspace_service.get_parent(db, user, folder_id)
    return ParentResponse(folder=folder_id, parent=parent)


@router.post(
    "/{folder_id}/move",
    response_model=FolderResponse,
    responses={
        **_NOT_YOURS,
        409: {"description": "Move would create a cycle", "model": ErrorResponse},
    },
    summary="Move a folder under a new parent",
)
async def move_folder(
    folder_id: str,
    body: MoveFolderRequest,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FolderResponse:
    return await workspace_service.move_folder(db, user, folder_id, body.new_parent)


@router.delete(
    "/{folder_id}",
    response_model=FolderDeletionResponse,
    responses=_NOT_YOURS,
    summary="Delete a folder, its sub-folders and the notes inside them",
)
async def delete_folder(
    folder_id: str,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FolderDeletionResponse:
    return await workspace_service.delete_folder(db, user, folder_id)


@router.post(
    "/{folder_id}/items",
    response_model=FolderResponse,
    responses=_NOT_YOURS,
    summary="Place a note in this folder, taking it out of its previous folder",
)
async def insert_item(
    folder_id: str,
    body: InsertItemRequest,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FolderResponse:
    await workspace_service.move_note(db, user, body.item, folder_id)
    return await workspace_service.get_folder(db, user, folder_id)
