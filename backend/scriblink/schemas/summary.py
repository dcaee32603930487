"""
Scriblink Backend — Summary Schemas
=====================================

What:  API contract for summaries and for the standalone validation endpoint.
"""

from typing import Optional

from pydantic import BaseModel, Field


class SummaryResponse(BaseModel):
    item: str = Field(description="Summarized item id")
    summary: str = Field(description="Summary text")


class SetSummaryRequest(BaseModel):
    summary: str = Field(description="Human-written summary (stored as given)")


class GenerateSummaryRequest(BaseModel):
    text: str = Field(description="Source text the model should summarize")


class ValidateSummaryRequest(BaseModel):
    source: str = Field(description="Source text")
    summary: str = Field(description="Candidate summary")


class SummaryVerdictResponse(BaseModel):
    """
    What:  Accept/reject outcome of the summary validator.
    reason: null when accepted, else length_exceeded | meta_language | low_relevance
    """
    accepted: bool
    reason: Optional[str] = None
    message: Optional[str] = None
    details: dict = Field(default_factory=dict)
