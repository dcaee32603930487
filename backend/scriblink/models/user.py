"""User credentials for PasswordAuth. Only a bcrypt hash is ever stored."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from scriblink.database import Base, fresh_id


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=fresh_id)
    username: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
