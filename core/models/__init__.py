# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - common.py: camelCase base models and pagination
# - user.py: Registration, login, account update schemas
# - book.py: Catalog schemas and the average-rating rule
# - review.py: Review create/update schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .common import ApiModel, Pagination, RequestModel
from .user import (
    DeletedUser,
    PasswordChange,
    RefreshTokenRequest,
    UserLogin,
    UserPublic,
    UserRegister,
    UserUpdate,
)
from .review import (
    MAX_COMMENT_LENGTH,
    MAX_RATING,
    MIN_RATING,
    Review,
    ReviewCreate,
    ReviewUpdate,
)
from .book import (
    Book,
    BookCreate,
    BookDetail,
    BookPage,
    compute_average_rating,
)

__all__ = [
    # Common
    "ApiModel",
    "Pagination",
    "RequestModel",
    # Users
    "DeletedUser",
    "PasswordChange",
    "RefreshTokenRequest",
    "UserLogin",
    "UserPublic",
    "UserRegister",
    "UserUpdate",
    # Reviews
    "MAX_COMMENT_LENGTH",
    "MAX_RATING",
    "MIN_RATING",
    "Review",
    "ReviewCreate",
    "ReviewUpdate",
    # Books
    "Book",
    "BookCreate",
    "BookDetail",
    "BookPage",
    "compute_average_rating",
]
