"""
Scriblink Backend — Password Authentication
=============================================

What:  Username/password registration and login.
How:   Passwords are hashed with bcrypt; only the hash is stored. bcrypt reads
       at most 72 bytes of input, so longer passwords are truncated explicitly.

Login failures always carry the same message, whether the username is unknown
or the password wrong.
"""

import logging

import bcrypt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scriblink.database import fresh_id
from scriblink.exceptions import AuthenticationError, ConflictError, ValidationError
from scriblink.models.user import User

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode()[:BCRYPT_MAX_BYTES], bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode()[:BCRYPT_MAX_BYTES], password_hash.encode())


class AuthService:

    async def register(self, db: AsyncSession, username: str, password: str) -> str:
        """
        Create a user and return its id.

        Raises:
            ValidationError: blank username or password
            ConflictError: username taken
        """
        if not username or not username.strip():
            raise ValidationError(message="Username cannot be empty.", field="username")
        if not password or not password.strip():
            raise ValidationError(message="Password cannot be empty.", field="password")

        if await self._by_username(db, username) is not None:
            raise ConflictError(
                message=f"Username '{username}' is already taken.",
                context={"username": username},
            )

        user = User(id=fresh_id(), username=username, password_hash=hash_password(password))
        db.add(user)
        await db.flush()
        logger.info("User %s registered", user.id)
        return user.id

    async def authenticate(self, db: AsyncSession, username: str, password: str) -> str:
        """Return the user id for valid credentials, else raise AuthenticationError."""
        user = await self._by_username(db, username)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt for username '%s'", username)
            raise AuthenticationError()
        return user.id

    async def _by_username(self, db: AsyncSession, username: str):
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()


auth_service = AuthService()
