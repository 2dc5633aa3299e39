# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .book_service import BookService
from .review_service import ReviewService
from .user_service import UserService
from .auth_service import AuthService

__all__ = [
    "AuthService",
    "BookService",
    "ReviewService",
    "UserService",
]
