# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Query

from app.exceptions import invalid_id_error
from core.models import Pagination
from lib.supabase_client import SupabaseClient
from lib.utils import parse_uuid


def get_supabase_client() -> type[SupabaseClient]:
    """
    Get Supabase client wrapper.

    Returns the singleton client wrapper.
    """
    return SupabaseClient


def get_pagination(
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 10,
) -> Pagination:
    """`page`/`limit` query parameters as a Pagination window."""
    return Pagination(page=page, limit=limit)


def require_uuid(value: str, resource: str) -> UUID:
    """
    Parse a path id, rejecting malformed values with a 400.

    Path ids are declared as plain strings so a bad id is reported as a
    client error in the envelope rather than a routing mismatch.
    """
    parsed = parse_uuid(value)
    if parsed is None:
        raise invalid_id_error(resource)
    return parsed


# Type aliases for dependency injection
SupabaseDep = Annotated[type[SupabaseClient], Depends(get_supabase_client)]
PaginationDep = Annotated[Pagination, Depends(get_pagination)]
