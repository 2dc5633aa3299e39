# =============================================================================
# app/routers/users.py - User Account Endpoints
# =============================================================================
# Registration, login, token refresh and account management.
# Routes under "Protected" require a valid access token.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Cookie
from fastapi.responses import JSONResponse

from app.auth import CurrentUser
from app.auth.cookies import REFRESH_TOKEN_COOKIE, clear_auth_cookies, set_auth_cookies
from app.responses import success_response
from core.models import (
    PasswordChange,
    RefreshTokenRequest,
    UserLogin,
    UserRegister,
    UserUpdate,
)
from core.services import AuthService, UserService

router = APIRouter()


# =============================================================================
# Public Endpoints
# =============================================================================

@router.post("/register", status_code=201)
async def register_user(request: UserRegister) -> JSONResponse:
    """
    Create an account.

    Returns the new user without password or refresh token.
    409 if the username or email is already taken.
    """
    user = UserService.register(request)
    return success_response("User registered successfully", user, status_code=201)


@router.post("/login")
async def login_user(request: UserLogin) -> JSONResponse:
    """
    Log in with username or email plus password.

    Both tokens are returned in the body and set as http-only cookies.
    """
    result = AuthService.login(request)
    response = success_response("Login successful", result)
    return set_auth_cookies(response, result.access_token, result.refresh_token)


@router.post("/refresh-token")
async def refresh_access_token(
    refresh_cookie: Annotated[str | None, Cookie(alias=REFRESH_TOKEN_COOKIE)] = None,
    request: RefreshTokenRequest | None = None,
) -> JSONResponse:
    """
    Trade a refresh token for a new token pair.

    The token is read from the `refreshToken` cookie, or the request body.
    The presented token is invalidated by this call.
    """
    incoming = refresh_cookie or (request.refresh_token if request else None)
    tokens = AuthService.refresh(incoming)
    response = success_response("Tokens refreshed successfully", tokens)
    return set_auth_cookies(response, tokens.access_token, tokens.refresh_token)


# =============================================================================
# Protected Endpoints
# =============================================================================

@router.post("/logout")
async def logout_user(user: CurrentUser) -> JSONResponse:
    """End the session and clear auth cookies."""
    AuthService.logout(user.id)
    return clear_auth_cookies(success_response("Logged out successfully"))


@router.patch("/update-account")
async def update_account_details(request: UserUpdate, user: CurrentUser) -> JSONResponse:
    """Update full name, email and/or username."""
    updated = UserService.update_account(user.id, request)
    return success_response("Account details updated successfully", updated)


@router.post("/change-password")
async def change_current_password(request: PasswordChange, user: CurrentUser) -> JSONResponse:
    UserService.change_password(user.id, request)
    return success_response("Password changed successfully")


@router.get("/current-user")
async def get_current_user(user: CurrentUser) -> JSONResponse:
    return success_response("User fetched successfully", user)


@router.delete("/delete")
async def delete_user(user: CurrentUser) -> JSONResponse:
    """
    Delete the account and its reviews.

    Auth cookies are cleared in the same response.
    """
    deleted = UserService.delete_account(user.id)
    response = success_response("User deleted successfully", {"deletedUser": deleted})
    return clear_auth_cookies(response)
