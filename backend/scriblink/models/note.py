"""
Scriblink Backend — Note SQLAlchemy Model
===========================================

What:  ORM model representing the `notes` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by NoteService for CRUD operations.

Invariants:
    - each note has exactly one owner
    - last_modified >= date_created
    - only the owner can view, modify or delete the note (enforced by NoteService)
"""

from datetime import datetime, timezone

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from scriblink.database import Base, UTCDateTime, fresh_id

DEFAULT_NOTE_TITLE = "Untitled"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A user's note: a title and body text.

    Lifecycle:
        1. Created with the given (or default) title and empty content
        2. Title and content edited by the owner; content edits bump last_modified
        3. Deleted by the owner, which cascades to folder membership, tags
           and the summary (see WorkspaceService)
    """

    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=fresh_id)
    title: Mapped[str] = mapped_column(
        String(255), nullable=False, default=DEFAULT_NOTE_TITLE
    )
    # TEXT: no artificial limit on note length
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    owner: Mapped[str] = mapped_column(String(36), nullable=False)
    date_created: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=_utcnow
    )
    last_modified: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=_utcnow
    )

    # Most common query: "all notes of this user"
    __table_args__ = (
        Index("idx_notes_owner", "owner"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, owner='{self.owner}', title='{self.title}')>"
