# =============================================================================
# core/services/auth_service.py - Login Session Business Logic
# =============================================================================
# Each user has one session slot: the refresh_token column.
#
#   NoSession --login--> Active --refresh--> Active (new token) --logout--> NoSession
#
# Issuing tokens always overwrites the slot, so the previous refresh token
# stops working. Presenting a refresh token that doesn't match the slot
# (reuse after rotation, or after logout) is rejected.
# =============================================================================

import logging
from uuid import UUID

from jose import ExpiredSignatureError, JWTError

from app.auth.models import LoginResult, TokenPair
from app.auth.tokens import create_access_token, create_refresh_token, decode_refresh_token
from app.exceptions import NotFoundError, UnauthorizedError
from core.models import UserLogin, UserPublic
from core.services.user_service import UserService, verify_password
from lib.utils import parse_uuid

logger = logging.getLogger(__name__)


class AuthService:
    """Token issuance and rotation."""

    @staticmethod
    def issue_tokens(user_id: UUID | str) -> TokenPair:
        """
        Sign a fresh access/refresh pair and store the refresh token.

        Raises:
            NotFoundError: If the user doesn't exist
        """
        user = UserService.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")

        access_token = create_access_token(user)
        refresh_token = create_refresh_token(user["id"])

        UserService.set_refresh_token(user["id"], refresh_token)

        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    @staticmethod
    def login(data: UserLogin) -> LoginResult:
        """
        Check credentials and open a session.

        Raises:
            NotFoundError: If no user has that username/email
            UnauthorizedError: If the password is wrong
        """
        user = UserService.find_by_login(data.username, data.email)

        if user is None:
            raise NotFoundError(
                "User not found",
                [{"message": "No user found with these credentials"}],
            )

        if not verify_password(user.get("password"), data.password):
            logger.warning(f"Failed login for user {user['id']}")
            raise UnauthorizedError("Invalid credentials", [{"message": "Incorrect password"}])

        tokens = AuthService.issue_tokens(user["id"])
        logger.info(f"User logged in: {user['id']}")

        return LoginResult(
            user=UserPublic.model_validate(user),
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
        )

    @staticmethod
    def refresh(incoming_refresh_token: str | None) -> TokenPair:
        """
        Rotate a session: trade a valid refresh token for a new pair.

        Raises:
            UnauthorizedError: If the token is missing, malformed, expired,
                belongs to no user, or is not the one currently stored
        """
        if not incoming_refresh_token:
            raise UnauthorizedError("Refresh token required", [{"message": "No refresh token provided"}])

        try:
            payload = decode_refresh_token(incoming_refresh_token)
        except ExpiredSignatureError:
            raise UnauthorizedError("Refresh token expired", [{"message": "Please login again"}])
        except JWTError as e:
            logger.warning(f"Refresh token validation failed: {e}")
            raise UnauthorizedError("Invalid refresh token", [{"message": "Invalid token format"}])

        user_id = parse_uuid(payload.sub)
        user = UserService.get_user(user_id) if user_id else None
        if user is None:
            raise UnauthorizedError("Invalid refresh token", [{"message": "User not found"}])

        if incoming_refresh_token != user.get("refresh_token"):
            logger.warning(f"Stale refresh token presented for user {user['id']}")
            raise UnauthorizedError(
                "Invalid refresh token",
                [{"message": "Refresh token is expired or used"}],
            )

        tokens = AuthService.issue_tokens(user["id"])
        logger.info(f"Rotated tokens for user {user['id']}")
        return tokens

    @staticmethod
    def logout(user_id: UUID | str) -> None:
        """Close the session by clearing the stored refresh token."""
        UserService.set_refresh_token(user_id, None)
        logger.info(f"User logged out: {user_id}")
