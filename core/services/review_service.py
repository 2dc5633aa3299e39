# =============================================================================
# core/services/review_service.py - Review Business Logic
# =============================================================================
# Handles review CRUD, ownership checks and the one-review-per-book rule.
#
# The rule is enforced twice: a lookup here gives a clear error in the common
# case, and the reviews (user_id, book_id) unique constraint rejects the
# losing insert when two submissions race. The API maps that duplicate-key
# error to the same 400.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import (
    DUPLICATE_REVIEW_MESSAGE,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
)
from core.models import Book, Pagination, Review, ReviewCreate, ReviewUpdate
from core.services.book_service import BookService
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Service for review operations.

    Every mutation recomputes the owning book's average rating.
    """

    @staticmethod
    def get_review(review_id: UUID | str) -> Review:
        """
        Get a review by ID.

        Raises:
            NotFoundError: If the review doesn't exist
        """
        row = SupabaseClient.fetch_by_id("reviews", review_id)
        if not row:
            raise NotFoundError("Review not found", [{"field": "id", "message": "No review with this ID"}])
        return Review.model_validate(row)

    @staticmethod
    def get_owned_review(review_id: UUID | str, user_id: UUID | str, action: str) -> Review:
        """
        Get a review and check that `user_id` wrote it.

        Raises:
            NotFoundError: If the review doesn't exist
            ForbiddenError: If another user owns the review
        """
        review = ReviewService.get_review(review_id)
        if str(review.user_id) != str(user_id):
            logger.warning(f"User {user_id} tried to {action} review {review_id} owned by {review.user_id}")
            raise ForbiddenError(
                f"You can only {action} your own reviews",
                [{"message": f"Not authorized to {action} this review"}],
            )
        return review

    @staticmethod
    def find_user_review(book_id: UUID | str, user_id: UUID | str) -> Review | None:
        client = SupabaseClient.get_client()
        response = (
            client.table("reviews")
            .select("*")
            .eq("book_id", normalize_uuid(book_id))
            .eq("user_id", normalize_uuid(user_id))
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return Review.model_validate(rows[0]) if rows else None

    @staticmethod
    def list_for_book(book_id: UUID | str, pagination: Pagination) -> tuple[list[Review], int]:
        """
        One page of a book's reviews, newest first.

        Returns:
            Tuple of (reviews, total review count)
        """
        client = SupabaseClient.get_client()
        response = (
            client.table("reviews")
            .select("*", count="exact")
            .eq("book_id", normalize_uuid(book_id))
            .order("created_at", desc=True)
            .range(pagination.offset, pagination.end)
            .execute()
        )
        reviews = [Review.model_validate(row) for row in response.data or []]
        return reviews, response.count or 0

    @staticmethod
    def add_review(
        book_id: UUID | str,
        user_id: UUID | str,
        data: ReviewCreate,
    ) -> tuple[Review, Book]:
        """
        Review a book.

        Returns:
            Tuple of (created review, book with recomputed average)

        Raises:
            NotFoundError: If the book doesn't exist
            BadRequestError: If the user already reviewed this book
        """
        book = BookService.get_book(book_id)

        if ReviewService.find_user_review(book.id, user_id):
            raise BadRequestError(
                DUPLICATE_REVIEW_MESSAGE,
                [{"message": "Only one review per book is allowed"}],
            )

        client = SupabaseClient.get_client()
        response = (
            client.table("reviews")
            .insert({
                "book_id": str(book.id),
                "user_id": normalize_uuid(user_id),
                "rating": data.rating,
                "comment": data.comment,
            })
            .execute()
        )

        review = Review.model_validate(response.data[0])
        book = BookService.recompute_average_rating(book.id) or book

        logger.info(f"User {user_id} reviewed book {book.id} (rating {review.rating})")
        return review, book

    @staticmethod
    def update_review(
        review_id: UUID | str,
        user_id: UUID | str,
        data: ReviewUpdate,
    ) -> Review:
        """
        Change a review's rating and/or comment.

        Raises:
            NotFoundError: If the review doesn't exist
            ForbiddenError: If another user owns the review
        """
        review = ReviewService.get_owned_review(review_id, user_id, "update")

        update_data: dict[str, Any] = data.model_dump(
            include={"rating", "comment"},
            exclude_none=True,
        )

        client = SupabaseClient.get_client()
        response = (
            client.table("reviews")
            .update(update_data)
            .eq("id", str(review.id))
            .execute()
        )

        updated = Review.model_validate(response.data[0]) if response.data else review
        if "rating" in update_data:
            BookService.recompute_average_rating(updated.book_id)

        logger.info(f"Updated review {review.id}: {sorted(update_data)}")
        return updated

    @staticmethod
    def delete_review(review_id: UUID | str, user_id: UUID | str) -> Review:
        """
        Delete a review and recompute its book's average.

        Raises:
            NotFoundError: If the review doesn't exist
            ForbiddenError: If another user owns the review
        """
        review = ReviewService.get_owned_review(review_id, user_id, "delete")

        client = SupabaseClient.get_client()
        client.table("reviews").delete().eq("id", str(review.id)).execute()

        BookService.recompute_average_rating(review.book_id)

        logger.info(f"Deleted review {review.id} on book {review.book_id}")
        return review

    @staticmethod
    def delete_for_user(user_id: UUID | str) -> list[str]:
        """
        Delete every review written by a user.

        Returns:
            IDs of the books those reviews belonged to
        """
        client = SupabaseClient.get_client()
        response = (
            client.table("reviews")
            .delete()
            .eq("user_id", normalize_uuid(user_id))
            .execute()
        )
        return sorted({row["book_id"] for row in response.data or []})
