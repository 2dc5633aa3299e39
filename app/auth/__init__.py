# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication with access/refresh token rotation.
#
# Usage:
#   from app.auth import CurrentUser
#
#   @router.get("/protected")
#   async def protected(user: CurrentUser):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import CurrentUser, get_current_user
from app.auth.models import LoginResult, TokenPair, TokenPayload

__all__ = [
    "CurrentUser",
    "get_current_user",
    "LoginResult",
    "TokenPair",
    "TokenPayload",
]
