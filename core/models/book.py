# =============================================================================
# core/models/book.py - Book Schemas
# =============================================================================
# These models define the API contract for the catalog:
# - BookCreate: Input for adding a book
# - Book: A catalog entry with its derived average rating
# - BookPage / BookDetail: Paginated listing and single-book views
#
# The average rating is never accepted from clients. It is recomputed from
# the full review set every time a review changes (see compute_average_rating).
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import Field

from .common import ApiModel, RequestModel
from .review import Review


def compute_average_rating(ratings: list[int]) -> float:
    """
    Mean of all ratings, rounded to 2 decimals; 0 when there are none.

    Example:
        compute_average_rating([5, 4, 4])  # 4.33
        compute_average_rating([])         # 0.0
    """
    if not ratings:
        return 0.0
    return round(sum(ratings) / len(ratings), 2)


class BookCreate(RequestModel):
    """
    Schema for adding a book. All four fields are required.

    Example:
        {
            "title": "Dune",
            "author": "Frank Herbert",
            "genre": "Science Fiction",
            "description": "Spice, sand and politics."
        }
    """

    title: str = Field(..., min_length=1, max_length=300)
    author: str = Field(..., min_length=1, max_length=200)
    genre: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)


class Book(ApiModel):
    id: UUID
    title: str
    author: str
    genre: str | None = None
    description: str | None = None
    average_rating: float = 0.0
    created_by: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Only populated when reviews were loaded alongside the book
    reviews: list[Review] = Field(default_factory=list)


class BookPage(ApiModel):
    """One page of a book listing or search."""

    books: list[Book]
    total_pages: int
    current_page: int
    total_books: int


class BookDetail(Book):
    """A book with one page of its reviews."""

    total_reviews: int = 0
    current_page: int = 1
    total_pages: int = 0
