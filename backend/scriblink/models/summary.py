"""Summary model: at most one summary per item, keyed by the item id."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from scriblink.database import Base


class Summary(Base):
    __tablename__ = "summaries"

    # The summarized item's id is the primary key, so a second set overwrites.
    item_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    summary: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Summary(item_id={self.item_id}, chars={len(self.summary)})>"
