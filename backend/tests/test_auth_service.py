"""Tests for password registration and login."""

import pytest
from sqlalchemy import select

from scriblink.exceptions import AuthenticationError, ConflictError, ValidationError
from scriblink.models.user import User
from scriblink.services.auth_service import AuthService, hash_password, verify_password


class TestPasswordHashing:

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("hunter2")
        assert hashed != "hunter2"
        assert verify_password("hunter2", hashed)
        assert not verify_password("hunter3", hashed)

    def test_long_passwords_are_accepted(self):
        hashed = hash_password("p" * 100)
        assert verify_password("p" * 100, hashed)


class TestAuthService:

    def setup_method(self):
        self.service = AuthService()

    @pytest.mark.asyncio
    async def test_register_then_authenticate(self, db_session):
        user = await self.service.register(db_session, "ada", "correct horse")

        assert await self.service.authenticate(db_session, "ada", "correct horse") == user

        stored = (await db_session.execute(select(User))).scalar_one()
        assert stored.password_hash != "correct horse"

    @pytest.mark.asyncio
    async def test_duplicate_username(self, db_session):
        await self.service.register(db_session, "ada", "pw")

        with pytest.raises(ConflictError):
            await self.service.register(db_session, "ada", "other")

    @pytest.mark.asyncio
    async def test_blank_password(self, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.register(db_session, "ada", "  ")
        assert exc_info.value.field == "password"

    @pytest.mark.asyncio
    async def test_failures_share_one_message(self, db_session):
        await self.service.register(db_session, "ada", "pw")

        with pytest.raises(AuthenticationError) as wrong_password:
            await self.service.authenticate(db_session, "ada", "nope")
        with pytest.raises(AuthenticationError) as unknown_user:
            await self.service.authenticate(db_session, "grace", "pw")

        assert wrong_password.value.message == unknown_user.value.message
        assert wrong_password.value.message == "Invalid username or password."
