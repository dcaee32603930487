"""
Scriblink Backend — Tag Route Handlers
========================================

What:  Label notes and look notes up by label.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from scriblink.database import get_db_session
from scriblink.routes.deps import get_current_user
from scriblink.schemas.common import ErrorResponse, SuccessResponse
from scriblink.schemas.tag import AddTagRequest, TagListResponse, TagResponse
from scriblink.services.tag_service import tag_service
from scriblink.services.workspace_service import workspace_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tags", tags=["Tags"])


@router.post(
    "",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Blank label", "model": ErrorResponse},
        409: {"description": "Note already has this label", "model": ErrorResponse},
    },
    summary="Tag a note, creating the label on first use",
)
async def add_tag(
    body: AddTagRequest,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> TagResponse:
    return await workspace_service.add_tag(db, user, body.label, body.item)


@router.get("", response_model=TagListResponse, summary="List the user's tags with their items")
async def list_tags(
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> TagListResponse:
    return TagListResponse(tags=await tag_service.get_user_tags(db, user))


@router.get("/{tag_id}", response_model=TagResponse)
async def get_tag(
    tag_id: str,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> TagResponse:
    return await workspace_service.get_tag(db, user, tag_id)


@router.delete(
    "/{tag_id}/items/{item_id}",
    response_model=SuccessResponse,
    responses={400: {"description": "Item does not carry this tag", "model": ErrorResponse}},
)
async def remove_tag_from_item(
    tag_id: str,
    item_id: str,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await workspace_service.remove_tag(db, user, tag_id, item_id)
    return SuccessResponse()
