"""
Scriblink Backend — Authentication Routes
===========================================

What:  Registration and login with a username and password.
How:   Both return the opaque user id that clients send back as X-User-ID.
       Registration also creates the user's root folder.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from scriblink.database import get_db_session
from scriblink.schemas.auth import CredentialsRequest, RegistrationResponse, UserResponse
from scriblink.schemas.common import ErrorResponse
from scriblink.services.workspace_service import workspace_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Blank username or password", "model": ErrorResponse},
        409: {"description": "Username already taken", "model": ErrorResponse},
    },
    summary="Create an account and its root folder",
)
async def register(
    body: CredentialsRequest,
    db: AsyncSession = Depends(get_db_session),
) -> RegistrationResponse:
    result = await workspace_service.register(db, body.username, body.password)
    return RegistrationResponse(**result)


@router.post(
    "/login",
    response_model=UserResponse,
    responses={401: {"description": "Invalid username or password", "model": ErrorResponse}},
    summary="Check credentials and return the user id",
)
async def login(
    body: CredentialsRequest,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await workspace_service.login(db, body.username, body.password)
    return UserResponse(user=user)
