# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for token data.
# =============================================================================

from typing import Literal

from pydantic import BaseModel

from core.models import ApiModel, UserPublic


class TokenPair(ApiModel):
    """Access + refresh token issued together."""
    access_token: str
    refresh_token: str


class LoginResult(ApiModel):
    """Body of a successful login."""
    user: UserPublic
    access_token: str
    refresh_token: str


class TokenPayload(BaseModel):
    """
    Decoded JWT claims.

    Both token kinds carry the user id in `sub`; `type` stops a refresh token
    from being accepted where an access token is expected and vice versa.
    """
    sub: str  # User ID
    type: Literal["access", "refresh"]
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
    jti: str  # Unique per token, so two tokens issued in the same second differ
    email: str | None = None
    username: str | None = None
    fullName: str | None = None
