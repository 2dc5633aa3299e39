# =============================================================================
# core/models/review.py - Review Schemas
# =============================================================================
# A review is a 1-5 rating plus an optional comment of at most 1000
# characters, owned by one user and attached to one book. Ratings must be
# JSON integers: booleans, floats and numeric strings are rejected.
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import Field, StrictInt, model_validator

from .common import ApiModel, RequestModel

MIN_RATING = 1
MAX_RATING = 5
MAX_COMMENT_LENGTH = 1000


class ReviewCreate(RequestModel):
    """
    Schema for reviewing a book.

    Example:
        {"rating": 4, "comment": "Slow start, great ending."}
    """

    rating: StrictInt = Field(..., ge=MIN_RATING, le=MAX_RATING)
    comment: str | None = Field(default=None, max_length=MAX_COMMENT_LENGTH)


class ReviewUpdate(RequestModel):
    """Change rating, comment, or both."""

    rating: StrictInt | None = Field(default=None, ge=MIN_RATING, le=MAX_RATING)
    comment: str | None = Field(default=None, max_length=MAX_COMMENT_LENGTH)

    @model_validator(mode="after")
    def require_any_field(self) -> "ReviewUpdate":
        if self.rating is None and self.comment is None:
            raise ValueError("Please provide either rating or comment to update")
        return self


class Review(ApiModel):
    id: UUID
    book_id: UUID
    user_id: UUID
    rating: int
    comment: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
