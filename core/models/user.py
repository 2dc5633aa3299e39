# =============================================================================
# core/models/user.py - User Schemas
# =============================================================================
# These models define the API contract for account operations:
# - UserRegister / UserLogin: public entry points
# - UserUpdate / PasswordChange: authenticated account changes
# - UserPublic: what clients see (never the password hash or refresh token)
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, model_validator

from .common import ApiModel, RequestModel


class UserRegister(RequestModel):
    """
    Schema for creating an account.

    Example:
        {
            "fullName": "Ada Lovelace",
            "email": "ada@example.com",
            "username": "ada",
            "password": "analytical-engine"
        }
    """

    full_name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)


class UserLogin(RequestModel):
    """
    Login with either a username or an email, plus the password.

    The email goes through the same normalization as at registration, so
    the address a user signed up with always finds their row.
    """

    username: str | None = None
    email: EmailStr | None = None
    password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def require_identifier(self) -> "UserLogin":
        if not self.username and not self.email:
            raise ValueError("Username or email is required")
        return self


class RefreshTokenRequest(RequestModel):
    """Body form of the refresh request (the cookie takes precedence)."""

    refresh_token: str | None = None


class UserUpdate(RequestModel):
    """Partial account update; at least one field must be present."""

    full_name: str | None = Field(default=None, min_length=2, max_length=120)
    email: EmailStr | None = None
    username: str | None = Field(default=None, min_length=1, max_length=50)

    @model_validator(mode="after")
    def require_any_field(self) -> "UserUpdate":
        if self.full_name is None and self.email is None and self.username is None:
            raise ValueError("Provide at least one field to update")
        return self


class PasswordChange(RequestModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)
    confirm_new_password: str = Field(..., min_length=1)


class UserPublic(ApiModel):
    """
    User as returned to clients.

    Built from a users row; the password hash and refresh token columns are
    simply not declared, so they never serialize.
    """

    id: UUID
    username: str
    email: str
    full_name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DeletedUser(ApiModel):
    id: UUID
    username: str
    email: str
