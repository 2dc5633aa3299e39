# =============================================================================
# app/responses.py - Uniform Response Envelope
# =============================================================================
# Every JSON body the API writes has the same shape:
#
#   { statusCode, success, message, data?, error?, meta? }
#
# Handlers build an ApiResponse and hand it to ApiResponse.send(), which
# returns the Starlette response. Exception handlers use the same path, so
# success and failure bodies never diverge.
# =============================================================================

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


class ApiResponse:
    """
    Response envelope.

    `data` and `error` are passed through untouched apart from JSON encoding
    (pydantic models, UUIDs and datetimes become plain JSON values).
    Optional keys that are None are left out of the body.
    """

    def __init__(
        self,
        status_code: int,
        success: bool,
        message: str,
        data: Any = None,
        error: Any = None,
        meta: dict[str, Any] | None = None,
    ):
        self.status_code = status_code
        self.success = success
        self.message = message
        self.data = data
        self.error = error
        self.meta = meta

    def to_dict(self) -> dict[str, Any]:
        """Convert envelope to the wire representation."""
        body: dict[str, Any] = {
            "statusCode": self.status_code,
            "success": self.success,
            "message": self.message,
        }
        if self.data is not None:
            body["data"] = jsonable_encoder(self.data)
        if self.error is not None:
            body["error"] = jsonable_encoder(self.error)
        if self.meta is not None:
            body["meta"] = jsonable_encoder(
                {k: v for k, v in self.meta.items() if v is not None}
            )
        return body

    @staticmethod
    def send(response: "ApiResponse") -> JSONResponse:
        """Write the envelope with its own status code."""
        return JSONResponse(
            status_code=response.status_code,
            content=response.to_dict(),
        )


def success_response(
    message: str,
    data: Any = None,
    status_code: int = 200,
    meta: dict[str, Any] | None = None,
) -> JSONResponse:
    """Shortcut for the common success path."""
    return ApiResponse.send(
        ApiResponse(
            status_code=status_code,
            success=True,
            message=message,
            data=data,
            meta=meta,
        )
    )
