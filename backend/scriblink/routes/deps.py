"""Shared route dependencies."""

from fastapi import Header

from scriblink.exceptions import AuthenticationError


async def get_current_user(x_user_id: str | None = Header(default=None)) -> str:
    """
    Opaque id of the requesting user, taken from the X-User-ID header.

    The id is returned by /api/auth/register and /api/auth/login.
    """
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError(message="Missing X-User-ID header.")
    return x_user_id.strip()
