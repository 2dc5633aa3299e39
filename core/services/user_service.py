# =============================================================================
# core/services/user_service.py - User Account Business Logic
# =============================================================================
# Handles user CRUD and the password / refresh-token columns.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from werkzeug.security import check_password_hash, generate_password_hash

from app.exceptions import BadRequestError, ConflictError, NotFoundError
from core.models import DeletedUser, PasswordChange, UserPublic, UserRegister, UserUpdate
from core.services.book_service import BookService
from core.services.review_service import ReviewService
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

# Everything except the password hash and refresh token
PUBLIC_COLUMNS = "id, username, email, full_name, created_at, updated_at"


def hash_password(password: str) -> str:
    """Salted hash suitable for the users.password column."""
    return generate_password_hash(password)


def verify_password(password_hash: str | None, password: str) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


class UserService:
    """
    Service for user account operations.

    Provides a clean interface between API routes and database.
    """

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @staticmethod
    def get_user(user_id: UUID | str) -> dict[str, Any] | None:
        """Full users row, including secrets. Never return this to clients."""
        return SupabaseClient.fetch_by_id("users", user_id)

    @staticmethod
    def get_public_user(user_id: UUID | str) -> UserPublic | None:
        row = SupabaseClient.fetch_by_id("users", user_id, PUBLIC_COLUMNS)
        return UserPublic.model_validate(row) if row else None

    @staticmethod
    def find_by_username(username: str) -> dict[str, Any] | None:
        return SupabaseClient.fetch_one("users", "username", username.lower())

    @staticmethod
    def find_by_email(email: str) -> dict[str, Any] | None:
        return SupabaseClient.fetch_one("users", "email", email)

    @staticmethod
    def find_by_login(username: str | None, email: str | None) -> dict[str, Any] | None:
        """Look a user up by username, then by email."""
        user = UserService.find_by_username(username) if username else None
        if user is None and email:
            user = UserService.find_by_email(email)
        return user

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    @staticmethod
    def register(data: UserRegister) -> UserPublic:
        """
        Create a new account.

        Raises:
            ConflictError: If the username or email is already taken
        """
        username = data.username.lower()

        if UserService.find_by_username(username):
            raise ConflictError(
                "Username already exists",
                [{"field": "username", "message": "This username is already taken"}],
            )
        if UserService.find_by_email(data.email):
            raise ConflictError(
                "Email already exists",
                [{"field": "email", "message": "This email is already registered"}],
            )

        client = SupabaseClient.get_client()
        response = (
            client.table("users")
            .insert({
                "username": username,
                "email": data.email,
                "full_name": data.full_name,
                "password": hash_password(data.password),
            })
            .execute()
        )

        created = response.data[0]
        logger.info(f"Registered user: {created['id']} ({username})")
        return UserPublic.model_validate(created)

    @staticmethod
    def update_account(user_id: UUID | str, data: UserUpdate) -> UserPublic:
        """
        Update full name, email and/or username.

        Raises:
            ConflictError: If the new email or username belongs to another user
            NotFoundError: If the user disappeared meanwhile
        """
        user_id_str = normalize_uuid(user_id)
        client = SupabaseClient.get_client()

        update_data: dict[str, Any] = {}
        if data.full_name is not None:
            update_data["full_name"] = data.full_name

        if data.email is not None:
            existing = UserService.find_by_email(data.email)
            if existing and existing["id"] != user_id_str:
                raise ConflictError(
                    "Email already exists",
                    [{"field": "email", "message": "This email is already registered"}],
                )
            update_data["email"] = data.email

        if data.username is not None:
            username = data.username.lower()
            existing = UserService.find_by_username(username)
            if existing and existing["id"] != user_id_str:
                raise ConflictError(
                    "Username already exists",
                    [{"field": "username", "message": "This username is already taken"}],
                )
            update_data["username"] = username

        response = (
            client.table("users")
            .update(update_data)
            .eq("id", user_id_str)
            .execute()
        )

        if not response.data:
            raise NotFoundError("User not found", [{"message": "Failed to update user details"}])

        logger.info(f"Updated account {user_id_str}: {sorted(update_data)}")
        return UserPublic.model_validate(response.data[0])

    @staticmethod
    def change_password(user_id: UUID | str, data: PasswordChange) -> None:
        """
        Replace the password hash after verifying the old password.

        Raises:
            BadRequestError: If the new password repeats the old one, the
                confirmation does not match, or the old password is wrong
        """
        if data.old_password == data.new_password:
            raise BadRequestError(
                "Invalid password change",
                [{"field": "newPassword", "message": "New password must be different from old password"}],
            )
        if data.new_password != data.confirm_new_password:
            raise BadRequestError(
                "Password mismatch",
                [{"field": "confirmNewPassword", "message": "New password and confirm password do not match"}],
            )

        user = UserService.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")

        if not verify_password(user.get("password"), data.old_password):
            raise BadRequestError(
                "Invalid password",
                [{"field": "oldPassword", "message": "Current password is incorrect"}],
            )

        client = SupabaseClient.get_client()
        client.table("users").update(
            {"password": hash_password(data.new_password)}
        ).eq("id", user["id"]).execute()

        logger.info(f"Password changed for user {user['id']}")

    @staticmethod
    def set_refresh_token(user_id: UUID | str, refresh_token: str | None) -> None:
        """Write (or clear, with None) the single refresh-token slot."""
        client = SupabaseClient.get_client()
        client.table("users").update(
            {"refresh_token": refresh_token}
        ).eq("id", normalize_uuid(user_id)).execute()

    @staticmethod
    def delete_account(user_id: UUID | str) -> DeletedUser:
        """
        Delete a user and their reviews.

        The reviews are removed first, then the average rating of every book
        they were attached to is recomputed.

        Raises:
            NotFoundError: If the user does not exist
        """
        user_id_str = normalize_uuid(user_id)
        if UserService.get_public_user(user_id_str) is None:
            raise NotFoundError("User not found", [{"message": "Failed to delete user"}])

        reviewed_books = ReviewService.delete_for_user(user_id_str)

        client = SupabaseClient.get_client()
        response = (
            client.table("users")
            .delete()
            .eq("id", user_id_str)
            .execute()
        )

        if not response.data:
            raise NotFoundError("User not found", [{"message": "Failed to delete user"}])

        for book_id in reviewed_books:
            BookService.recompute_average_rating(book_id)

        logger.info(f"Deleted user {user_id_str} ({len(reviewed_books)} reviews removed)")
        return DeletedUser.model_validate(response.data[0])
