# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import math
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Example:
        book_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        book_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


def parse_uuid(value: str) -> UUID | None:
    """
    Parse a path parameter as a UUID.

    Returns:
        The UUID, or None if the value is not a well-formed UUID
    """
    try:
        return UUID(str(value))
    except (ValueError, TypeError):
        return None


# =============================================================================
# Pagination
# =============================================================================

def total_pages(total: int, limit: int) -> int:
    """
    Number of pages needed to show `total` items, `limit` per page.

    Example:
        total_pages(2, 10)   # 1
        total_pages(21, 10)  # 3
        total_pages(0, 10)   # 0
    """
    return math.ceil(total / limit)
