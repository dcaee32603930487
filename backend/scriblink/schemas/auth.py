"""Pydantic models for PasswordAuth requests and responses."""

from pydantic import BaseModel, Field


class CredentialsRequest(BaseModel):
    username: str = Field(min_length=1, max_length=150)
    password: str


class UserResponse(BaseModel):
    user: str = Field(description="Opaque user id; send it back as X-User-ID")


class RegistrationResponse(UserResponse):
    root_folder: str = Field(description="Root folder created for the new user")
