# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides the request guard for protected routes.
#
# The access token is read from the `accessToken` cookie first, then from an
# `Authorization: Bearer <token>` header.
#
# Usage:
#   from app.auth import CurrentUser
#
#   @router.get("/protected")
#   async def protected(user: CurrentUser):
#       return {"user_id": user.id}
# =============================================================================

import logging
from typing import Annotated

from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError

from app.auth.cookies import ACCESS_TOKEN_COOKIE
from app.auth.tokens import decode_access_token
from app.exceptions import UnauthorizedError
from core.models import UserPublic
from core.services.user_service import UserService
from lib.utils import parse_uuid

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor; missing header is handled below, not by FastAPI
security_optional = HTTPBearer(auto_error=False)


async def get_current_user(
    access_token: Annotated[str | None, Cookie(alias=ACCESS_TOKEN_COOKIE)] = None,
    credentials: HTTPAuthorizationCredentials | None = Depends(security_optional),
) -> UserPublic:
    """
    Authenticate the request and return the user.

    This dependency:
    1. Takes the token from the cookie, or failing that the Bearer header
    2. Verifies the JWT signature and expiry
    3. Loads the user without password or refresh token

    Raises:
        UnauthorizedError: 401 if the token is missing, malformed, expired,
            or the user no longer exists
    """
    token = access_token or (credentials.credentials if credentials else None)

    if not token:
        raise UnauthorizedError(
            "Authentication required",
            [{"message": "No access token provided"}],
        )

    try:
        payload = decode_access_token(token)
    except ExpiredSignatureError:
        logger.warning("Access token has expired")
        raise UnauthorizedError("Token expired", [{"message": "Please login again"}])
    except JWTError as e:
        logger.warning(f"Access token validation failed: {e}")
        raise UnauthorizedError("Invalid token", [{"message": "Invalid token format"}])

    user_id = parse_uuid(payload.sub)
    user = UserService.get_public_user(user_id) if user_id else None

    if user is None:
        raise UnauthorizedError("Invalid access token", [{"message": "User not found"}])

    logger.debug(f"Authenticated user: {user.id}")
    return user


# Type alias for dependency injection
CurrentUser = Annotated[UserPublic, Depends(get_current_user)]
