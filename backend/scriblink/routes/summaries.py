"""
Scriblink Backend — Summary Route Handlers
============================================

What:  Per-note summaries (manual or AI-generated) and a stateless validator.

Error mapping:
    ValidationError        → 400 (blank summary, blank source text)
    SummaryRejectedError   → 422 (model answer failed validation)
    LLMServiceError        → 503 (Gemini unreachable or circuit open)
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from scriblink.database import get_db_session
from scriblink.routes.deps import get_current_user
from scriblink.schemas.common import ErrorResponse, SuccessResponse
from scriblink.schemas.summary import (
    GenerateSummaryRequest,
    SetSummaryRequest,
    SummaryResponse,
    SummaryVerdictResponse,
    ValidateSummaryRequest,
)
from scriblink.services.summary_validator import summary_validator
from scriblink.services.workspace_service import workspace_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/summaries", tags=["Summaries"])


@router.post(
    "/validate",
    response_model=SummaryVerdictResponse,
    summary="Check a candidate summary against its source without storing it",
)
async def validate_summary(body: ValidateSummaryRequest) -> SummaryVerdictResponse:
    verdict = summary_validator.validate(body.source, body.summary)
    return SummaryVerdictResponse(
        accepted=verdict.accepted,
        reason=verdict.reason.value if verdict.reason else None,
        message=verdict.message,
        details=verdict.details,
    )


@router.get("/{note_id}", response_model=SummaryResponse)
async def get_summary(
    note_id: str,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SummaryResponse:
    return await workspace_service.get_summary(db, user, note_id)


@router.put(
    "/{note_id}",
    response_model=SummaryResponse,
    responses={400: {"description": "Blank summary", "model": ErrorResponse}},
    summary="Store a human-written summary as given",
)
async def set_summary(
    note_id: str,
    body: SetSummaryRequest,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SummaryResponse:
    return await workspace_service.set_summary(db, user, note_id, body.summary)


@router.post(
    "/{note_id}/generate",
    response_model=SummaryResponse,
    responses={
        400: {"description": "Empty source text", "model": ErrorResponse},
        422: {"description": "Generated summary rejected", "model": ErrorResponse},
        503: {"description": "AI service unavailable", "model": ErrorResponse},
    },
    summary="Generate, validate and store an AI summary",
    description="Summarizes `text` when given, else the note's current content.",
)
async def generate_summary(
    note_id: str,
    body: GenerateSummaryRequest | None = None,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SummaryResponse:
    text = body.text if body is not None else None
    return await workspace_service.generate_summary(db, user, note_id, text)


@router.delete("/{note_id}", response_model=SuccessResponse)
async def delete_summary(
    note_id: str,
    user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await workspace_service.delete_summary(db, user, note_id)
    return SuccessResponse()
