"""
Scriblink Backend — Note Request/Response Schemas
===================================================

What:  Pydantic models defining the notes API contract.
Why:   Strict input validation, automatic serialization, and OpenAPI doc generation.
How:   FastAPI uses these to validate request bodies and serialize responses.

Schemas are separate from SQLAlchemy models so the API exposes exactly the
fields we choose, independent of the table layout.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    What:  Full representation of a note.
    Who:   Returned by GET /api/notes/{id} and by note creation.
    """
    id: str = Field(description="Unique note identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Note body text")
    owner: str = Field(description="Owning user id")
    date_created: datetime = Field(description="When the note was created (UTC)")
    last_modified: datetime = Field(description="When the content last changed (UTC)")

    model_config = {"from_attributes": True}


class NoteListItem(BaseModel):
    """
    What:  Compact note representation for list views.
    Why:   Smaller payload; includes a content preview (first 200 chars)
           instead of the full body.
    """
    id: str
    title: str
    text_preview: str = Field(description="First 200 characters of content")
    last_modified: datetime


class NoteListResponse(BaseModel):
    notes: List[NoteListItem]
    total_count: int


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CreateNoteRequest(BaseModel):
    """
    What:  Body of POST /api/notes.
    folder: Target folder; the user's root folder when omitted.
    """
    title: Optional[str] = Field(default=None, max_length=255)
    content: str = Field(default="")
    folder: Optional[str] = Field(default=None, description="Folder to place the note in")


class SetTitleRequest(BaseModel):
    title: str = Field(max_length=255)


class UpdateContentRequest(BaseModel):
    content: str


class MoveNoteRequest(BaseModel):
    folder: str = Field(description="Destination folder id")
