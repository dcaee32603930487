"""
Scriblink Backend — Tag SQLAlchemy Models
===========================================

What:  A user-scoped label and the set of items flagged with it.
How:   `tags` holds one row per (owner, label); `tag_items` holds membership.
"""

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from scriblink.database import Base, fresh_id


class Tag(Base):
    __tablename__ = "tags"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=fresh_id)
    owner: Mapped[str] = mapped_column(String(36), nullable=False)
    label: Mapped[str] = mapped_column(String(100), nullable=False)

    __table_args__ = (
        UniqueConstraint("owner", "label", name="uq_tags_owner_label"),
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, owner='{self.owner}', label='{self.label}')>"


class TagItem(Base):
    __tablename__ = "tag_items"

    tag_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True
    )
    item_id: Mapped[str] = mapped_column(String(36), primary_key=True)

    __table_args__ = (
        Index("idx_tag_items_item", "item_id"),
    )
