# =============================================================================
# app/auth/cookies.py - Auth Cookie Helpers
# =============================================================================
# Both tokens travel as http-only cookies in addition to the JSON body.
# =============================================================================

from fastapi import Response

from app.config import settings

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "secure": settings.COOKIE_SECURE,
        "samesite": "lax",
        "path": "/",
    }


def set_auth_cookies(response: Response, access_token: str, refresh_token: str) -> Response:
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        **_cookie_options(),
    )
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        **_cookie_options(),
    )
    return response


def clear_auth_cookies(response: Response) -> Response:
    response.delete_cookie(ACCESS_TOKEN_COOKIE, **_cookie_options())
    response.delete_cookie(REFRESH_TOKEN_COOKIE, **_cookie_options())
    return response
