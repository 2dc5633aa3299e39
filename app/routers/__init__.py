# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - users.py: Registration, login, token refresh and account endpoints
# - books.py: Book catalog and review endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import users
from . import books

__all__ = [
    "health",
    "users",
    "books",
]
