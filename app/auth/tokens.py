# =============================================================================
# app/auth/tokens.py - JWT Signing and Verification
# =============================================================================
# Access tokens are short-lived and signed with ACCESS_TOKEN_SECRET.
# Refresh tokens are long-lived and signed with REFRESH_TOKEN_SECRET.
#
# Verification raises jose's ExpiredSignatureError / JWTError; callers turn
# those into 401s with a message that says which one happened.
# =============================================================================

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from pydantic import ValidationError

from app.auth.models import TokenPayload
from app.config import settings


def _encode(claims: dict[str, Any], secret: str, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "iat": now,
        "exp": now + lifetime,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)


def _decode(token: str, secret: str, expected_type: str) -> TokenPayload:
    # jwt.decode checks signature and exp; ExpiredSignatureError propagates
    claims = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])

    try:
        payload = TokenPayload(**claims)
    except ValidationError as e:
        raise JWTError(f"Malformed token claims: {e.error_count()} invalid") from e

    if payload.type != expected_type:
        raise JWTError(f"Expected {expected_type} token, got {payload.type}")

    return payload


def create_access_token(user: dict[str, Any]) -> str:
    """
    Sign an access token for a users row.

    Embeds the user id plus display claims so clients can render a profile
    without an extra request.
    """
    return _encode(
        {
            "sub": str(user["id"]),
            "type": "access",
            "email": user.get("email"),
            "username": user.get("username"),
            "fullName": user.get("full_name"),
        },
        settings.ACCESS_TOKEN_SECRET,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user_id: str) -> str:
    """Sign a refresh token that embeds only the user id."""
    return _encode(
        {"sub": str(user_id), "type": "refresh"},
        settings.REFRESH_TOKEN_SECRET,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def decode_access_token(token: str) -> TokenPayload:
    return _decode(token, settings.ACCESS_TOKEN_SECRET, "access")


def decode_refresh_token(token: str) -> TokenPayload:
    return _decode(token, settings.REFRESH_TOKEN_SECRET, "refresh")
