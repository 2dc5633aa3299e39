# =============================================================================
# app/exceptions.py - Error Taxonomy and Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
#
# Handlers and services raise ApiError subclasses for every expected failure.
# The functions at the bottom of this module are registered in main.py and
# form the single boundary that turns any exception into the response
# envelope (see app/responses.py).
# =============================================================================

import logging
import re
import traceback
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from jose import ExpiredSignatureError, JWTError
from postgrest.exceptions import APIError as PostgrestAPIError
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.responses import ApiResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    Base exception for the Book Review API.

    Carries the HTTP status, a human-readable message and a list of
    `{field?, message}` entries describing what went wrong.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors or []

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API error dict."""
        return {
            "statusCode": self.status_code,
            "message": self.message,
            "errors": self.errors,
        }


# =============================================================================
# Named Error Kinds
# =============================================================================

class BadRequestError(ApiError):
    """Validation failure or malformed input (400)."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(400, message, errors)


class UnauthorizedError(ApiError):
    """Missing, invalid or expired credential (401)."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(401, message, errors)


class ForbiddenError(ApiError):
    """Authenticated, but not the owner of the resource (403)."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(403, message, errors)


class NotFoundError(ApiError):
    """Resource absent (404)."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(404, message, errors)


class ConflictError(ApiError):
    """Uniqueness conflict (409)."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(409, message, errors)


class InternalServerError(ApiError):
    """Failure we detected but cannot attribute to the client (500)."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(500, message, errors)


DUPLICATE_REVIEW_MESSAGE = "You have already reviewed this book"
DUPLICATE_REVIEW_CONSTRAINT = "reviews_user_id_book_id_key"


def invalid_id_error(resource: str) -> BadRequestError:
    """Error for a path id that is not a valid UUID."""
    return BadRequestError(
        f"Invalid {resource} ID format",
        [{"field": "id", "message": f"Please provide a valid {resource} ID"}],
    )


# =============================================================================
# Store Error Translation
# =============================================================================
# Postgres error codes surfaced by PostgREST.

PG_UNIQUE_VIOLATION = "23505"
PG_NOT_NULL_VIOLATION = "23502"
PG_CHECK_VIOLATION = "23514"
PG_INVALID_TEXT = "22P02"
PG_VALUE_TOO_LONG = "22001"

_KEY_COLUMNS_RE = re.compile(r"Key \(([^)]+)\)=")
_NOT_NULL_COLUMN_RE = re.compile(r'column "([^"]+)"')
_CHECK_CONSTRAINT_RE = re.compile(r'relation "(\w+)" violates check constraint "(\w+)"')


def store_error_to_api_error(exc: PostgrestAPIError) -> ApiError:
    """
    Classify a PostgREST failure.

    Duplicate keys become 409 naming the conflicting field, except the
    one-review-per-book key which is reported like the application check.
    Constraint and type failures become 400 with one entry per field.
    Anything else is an internal error.
    """
    code = exc.code or ""
    message = exc.message or ""
    details = exc.details or ""

    if code == PG_UNIQUE_VIOLATION:
        if DUPLICATE_REVIEW_CONSTRAINT in message:
            return BadRequestError(
                DUPLICATE_REVIEW_MESSAGE,
                [{"message": "Only one review per book is allowed"}],
            )
        match = _KEY_COLUMNS_RE.search(details)
        columns = [c.strip() for c in match.group(1).split(",")] if match else []
        if columns:
            return ConflictError(
                f"{to_camel(columns[0]).capitalize()} already exists",
                [
                    {"field": to_camel(column), "message": f"This {to_camel(column)} is already in use"}
                    for column in columns
                ],
            )
        return ConflictError("Duplicate value", [{"message": message}])

    if code == PG_NOT_NULL_VIOLATION:
        match = _NOT_NULL_COLUMN_RE.search(message)
        field = to_camel(match.group(1)) if match else None
        return BadRequestError(
            "Validation failed",
            [{"field": field, "message": f"{field} is required" if field else message}],
        )

    if code == PG_CHECK_VIOLATION:
        match = _CHECK_CONSTRAINT_RE.search(message)
        field = None
        if match:
            table, constraint = match.groups()
            field = to_camel(constraint.removeprefix(f"{table}_").removesuffix("_check"))
        return BadRequestError(
            "Validation failed",
            [{"field": field, "message": f"Invalid value for {field}" if field else message}],
        )

    if code in (PG_INVALID_TEXT, PG_VALUE_TOO_LONG):
        return BadRequestError("Validation failed", [{"message": message}])

    return InternalServerError("Database operation failed", [{"message": message}])


# =============================================================================
# Exception Handlers
# =============================================================================

def _error_meta(request: Request, exc: Exception) -> dict[str, Any]:
    """Request context for error bodies; stack trace only in development."""
    return {
        "path": request.url.path,
        "method": request.method,
        "stack": "".join(traceback.format_exception(exc)) if settings.is_development else None,
    }


def _error_response(request: Request, exc: Exception, error: ApiError) -> JSONResponse:
    return ApiResponse.send(
        ApiResponse(
            status_code=error.status_code,
            success=False,
            message=error.message,
            error=error.errors,
            meta=_error_meta(request, exc),
        )
    )


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Domain errors pass through unchanged."""
    return _error_response(request, exc, exc)


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle Pydantic request validation errors.

    Every invalid field is reported, not just the first one.
    """
    errors = []
    for item in exc.errors():
        loc = [str(part) for part in item.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or None
        if item.get("type") == "missing" and field:
            message = f"{field} is required"
        else:
            message = item.get("msg", "Invalid value")
        errors.append({"field": field, "message": message})

    return _error_response(request, exc, BadRequestError("Validation failed", errors))


async def store_error_handler(request: Request, exc: PostgrestAPIError) -> JSONResponse:
    """Map database failures onto the taxonomy."""
    error = store_error_to_api_error(exc)
    if error.status_code >= 500:
        logger.error(f"Database error on {request.method} {request.url.path}: {exc.message}")
    return _error_response(request, exc, error)


async def jwt_error_handler(request: Request, exc: JWTError) -> JSONResponse:
    """Token failures that escaped the auth layer."""
    if isinstance(exc, ExpiredSignatureError):
        error = UnauthorizedError("Token expired", [{"message": "Please login again"}])
    else:
        error = UnauthorizedError("Invalid token", [{"message": "Invalid token format"}])
    return _error_response(request, exc, error)


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Routing errors (unknown path, wrong method) in envelope form."""
    error = ApiError(exc.status_code, str(exc.detail))
    response = _error_response(request, exc, error)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unexpected becomes a 500."""
    logger.exception(f"Unexpected error: {exc}")
    return ApiResponse.send(
        ApiResponse(
            status_code=500,
            success=False,
            message="Internal Server Error",
            error=str(exc),
            meta=_error_meta(request, exc),
        )
    )
