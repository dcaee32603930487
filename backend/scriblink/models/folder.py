"""
Scriblink Backend — Folder SQLAlchemy Models
==============================================

What:  ORM models for folders, their ordered sub-folder links and item membership.
Why:   A folder owns an ordered list of child folders and a set of opaque item ids.
How:   Two link tables carry the containment relation:
           folder_children  (parent_id, child_id, position)
           folder_items     (folder_id, item_id)

Parent pointers are NOT stored on the folder row. "Parent of X" is the folder
whose folder_children rows list X as child_id, found by a reverse lookup. A
folder with no such row is a root (or detached), which lets move/delete detach
it cleanly without raising.
"""

from datetime import datetime, timezone

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from scriblink.database import Base, UTCDateTime, fresh_id

ROOT_FOLDER_TITLE = "Root"


class Folder(Base):
    """A named container scoped to one owner for its entire life."""

    __tablename__ = "folders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=fresh_id)
    owner: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, owner='{self.owner}', title='{self.title}')>"


class FolderChild(Base):
    """
    One containment edge: `child_id` is listed in `parent_id`'s subfolders.

    `position` keeps insertion order; the (parent_id, child_id) key keeps a
    child from appearing twice under the same parent.
    """

    __tablename__ = "folder_children"

    parent_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("folders.id", ondelete="CASCADE"), primary_key=True
    )
    # No FK on child_id: a dangling child id is tolerated as a dead edge.
    child_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_folder_children_child", "child_id"),
    )


class FolderItem(Base):
    """Membership of an opaque item (e.g. a note) in a folder."""

    __tablename__ = "folder_items"

    folder_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("folders.id", ondelete="CASCADE"), primary_key=True
    )
    item_id: Mapped[str] = mapped_column(String(36), primary_key=True)

    __table_args__ = (
        Index("idx_folder_items_item", "item_id"),
    )
