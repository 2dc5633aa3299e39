# =============================================================================
# core/services/book_service.py - Book Catalog Business Logic
# =============================================================================
# Handles book creation, listing, search and the derived average rating.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from uuid import UUID

from app.exceptions import BadRequestError, NotFoundError
from core.models import Book, BookCreate, BookDetail, BookPage, Pagination, compute_average_rating
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)


class BookService:
    """
    Service for book catalog operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def create_book(data: BookCreate, user_id: UUID | str | None = None) -> Book:
        """
        Add a book to the catalog.

        Args:
            data: Validated book fields
            user_id: The user adding the book

        Returns:
            The created book (average rating starts at 0)
        """
        client = SupabaseClient.get_client()

        response = (
            client.table("books")
            .insert({
                "title": data.title,
                "author": data.author,
                "genre": data.genre,
                "description": data.description,
                "created_by": normalize_uuid(user_id) if user_id else None,
            })
            .execute()
        )

        book = Book.model_validate(response.data[0])
        logger.info(f"Created book: {book.id} ({book.title!r})")
        return book

    @staticmethod
    def get_book(book_id: UUID | str) -> Book:
        """
        Get a book by ID.

        Raises:
            NotFoundError: If the book doesn't exist
        """
        row = SupabaseClient.fetch_by_id("books", book_id)
        if not row:
            raise NotFoundError("Book not found", [{"field": "id", "message": "No book with this ID"}])
        return Book.model_validate(row)

    @staticmethod
    def get_book_detail(book_id: UUID | str, pagination: Pagination) -> BookDetail:
        """
        Get a book with one page of its reviews.

        Raises:
            NotFoundError: If the book doesn't exist
        """
        # Imported here: review_service imports this module
        from core.services.review_service import ReviewService

        book = BookService.get_book(book_id)
        reviews, total = ReviewService.list_for_book(book.id, pagination)

        return BookDetail(
            **book.model_dump(exclude={"reviews"}),
            reviews=reviews,
            total_reviews=total,
            current_page=pagination.page,
            total_pages=pagination.total_pages(total),
        )

    @staticmethod
    def list_books(
        pagination: Pagination,
        author: str | None = None,
        genre: str | None = None,
    ) -> BookPage:
        """
        List books, newest first.

        Args:
            pagination: Page window
            author: Case-insensitive substring filter on author
            genre: Case-insensitive substring filter on genre (ANDed with author)
        """
        client = SupabaseClient.get_client()

        query = client.table("books").select("*", count="exact")
        if author:
            query = query.ilike("author", f"%{author}%")
        if genre:
            query = query.ilike("genre", f"%{genre}%")

        response = (
            query.order("created_at", desc=True)
            .range(pagination.offset, pagination.end)
            .execute()
        )

        return BookService._page(response.data or [], response.count or 0, pagination)

    @staticmethod
    def search_books(
        pagination: Pagination,
        title: str | None = None,
        author: str | None = None,
    ) -> BookPage:
        """
        Search books whose title or author contains the given text.

        Raises:
            BadRequestError: If neither title nor author is given
        """
        if not title and not author:
            raise BadRequestError(
                "At least one search parameter (title or author) is required",
                [
                    {"field": "title", "message": "Provide a title or an author to search for"},
                    {"field": "author", "message": "Provide a title or an author to search for"},
                ],
            )

        conditions = []
        if title:
            conditions.append(f"title.ilike.{SupabaseClient.quote_filter_value(f'*{title}*')}")
        if author:
            conditions.append(f"author.ilike.{SupabaseClient.quote_filter_value(f'*{author}*')}")

        client = SupabaseClient.get_client()
        response = (
            client.table("books")
            .select("*", count="exact")
            .or_(",".join(conditions))
            .order("created_at", desc=True)
            .range(pagination.offset, pagination.end)
            .execute()
        )

        return BookService._page(response.data or [], response.count or 0, pagination)

    @staticmethod
    def recompute_average_rating(book_id: UUID | str) -> Book | None:
        """
        Recompute and store a book's average rating from all of its reviews.

        There is no incremental update: the full rating set is read each time.

        Returns:
            The updated book, or None if the book no longer exists
        """
        client = SupabaseClient.get_client()
        book_id_str = normalize_uuid(book_id)

        ratings_response = (
            client.table("reviews")
            .select("rating")
            .eq("book_id", book_id_str)
            .execute()
        )
        ratings = [row["rating"] for row in ratings_response.data or []]
        average = compute_average_rating(ratings)

        response = (
            client.table("books")
            .update({"average_rating": average})
            .eq("id", book_id_str)
            .execute()
        )

        if not response.data:
            return None

        logger.debug(f"Book {book_id_str} average rating: {average} over {len(ratings)} reviews")
        return Book.model_validate(response.data[0])

    @staticmethod
    def _page(rows: list[dict], total: int, pagination: Pagination) -> BookPage:
        return BookPage(
            books=[Book.model_validate(row) for row in rows],
            total_pages=pagination.total_pages(total),
            current_page=pagination.page,
            total_books=total,
        )

