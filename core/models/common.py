# =============================================================================
# core/models/common.py - Shared Model Base and Pagination
# =============================================================================
# Every API model serializes with camelCase keys (fullName, averageRating,
# totalPages) and accepts either camelCase or snake_case on input, so rows
# coming straight from the database validate without renaming.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lib.utils import total_pages


class ApiModel(BaseModel):
    """Base for response models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class RequestModel(ApiModel):
    """Base for request bodies: whitespace is stripped from strings."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class Pagination(BaseModel):
    """
    Page window from `page`/`limit` query parameters.

    Example:
        Pagination(page=2, limit=10).offset  # 10
        Pagination(page=2, limit=10).end     # 19 (inclusive, for range())
    """

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def end(self) -> int:
        """Inclusive index of the last row in the window."""
        return self.offset + self.limit - 1

    def total_pages(self, total: int) -> int:
        return total_pages(total, self.limit)
