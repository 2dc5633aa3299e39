# =============================================================================
# app/routers/books.py - Book and Review Endpoints
# =============================================================================
# Listing, search and detail views are public.
# Adding books and writing reviews require authentication; reviews can only
# be changed or removed by their author.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from app.auth import CurrentUser
from app.dependencies import PaginationDep, require_uuid
from app.responses import success_response
from core.models import BookCreate, ReviewCreate, ReviewUpdate
from core.services import BookService, ReviewService

router = APIRouter()


# =============================================================================
# Books
# =============================================================================

@router.get("")
async def get_all_books(
    pagination: PaginationDep,
    author: Annotated[str | None, Query(description="Filter by author (substring)")] = None,
    genre: Annotated[str | None, Query(description="Filter by genre (substring)")] = None,
) -> JSONResponse:
    """
    List books with pagination, newest first.

    `author` and `genre` filters are case-insensitive and combine with AND.
    """
    page = BookService.list_books(pagination, author=author, genre=genre)
    return success_response("Books fetched successfully", page)


@router.get("/search")
async def search_books(
    pagination: PaginationDep,
    title: Annotated[str | None, Query(description="Title contains")] = None,
    author: Annotated[str | None, Query(description="Author contains")] = None,
) -> JSONResponse:
    """
    Search by title or author.

    At least one parameter is required; matches on either are returned.
    """
    page = BookService.search_books(pagination, title=title, author=author)
    return success_response("Search completed successfully", page)


@router.get("/{book_id}")
async def get_book_by_id(book_id: str, pagination: PaginationDep) -> JSONResponse:
    """Get a book with one page of its reviews."""
    book = BookService.get_book_detail(require_uuid(book_id, "book"), pagination)
    return success_response("Book fetched successfully", book)


@router.post("", status_code=201)
async def add_book(request: BookCreate, user: CurrentUser) -> JSONResponse:
    book = BookService.create_book(request, user_id=user.id)
    return success_response("Book added successfully", book, status_code=201)


# =============================================================================
# Reviews
# =============================================================================

@router.post("/{book_id}/reviews", status_code=201)
async def add_review(book_id: str, request: ReviewCreate, user: CurrentUser) -> JSONResponse:
    """
    Review a book.

    One review per user per book; a second attempt is rejected with 400.
    """
    review, book = ReviewService.add_review(require_uuid(book_id, "book"), user.id, request)
    return success_response(
        "Review added successfully",
        {"review": review, "book": book},
        status_code=201,
    )


@router.put("/reviews/{review_id}")
async def update_review(review_id: str, request: ReviewUpdate, user: CurrentUser) -> JSONResponse:
    """Change your own review's rating and/or comment."""
    review = ReviewService.update_review(require_uuid(review_id, "review"), user.id, request)
    return success_response("Review updated successfully", review)


@router.delete("/reviews/{review_id}")
async def delete_review(review_id: str, user: CurrentUser) -> JSONResponse:
    """Delete your own review."""
    ReviewService.delete_review(require_uuid(review_id, "review"), user.id)
    return success_response("Review deleted successfully")
