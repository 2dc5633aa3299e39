# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides the small set of row helpers the services share:
# - Single-row lookups by column
# - PostgREST filter-string quoting for or() queries
# - A connectivity probe for health checks
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   user = SupabaseClient.fetch_one("users", "email", "a@b.com")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error creating or reaching the Supabase client.

    Query failures are not wrapped: they surface as postgrest APIError and
    are classified by the API's exception handlers.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                ) from e
        return cls._instance

    @classmethod
    def set_client(cls, client: Client | None) -> None:
        """Replace the singleton (None resets it)."""
        cls._instance = client

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    # -------------------------------------------------------------------------
    # Row Helpers
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_one(
        cls,
        table: str,
        column: str,
        value: Any,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch the first row where `column` equals `value`.

        Returns:
            Row dict, or None if no row matches
        """
        client = cls.get_client()
        if isinstance(value, UUID):
            value = cls._normalize_uuid(value)

        response = (
            client.table(table)
            .select(columns)
            .eq(column, value)
            .limit(1)
            .execute()
        )

        rows = response.data or []
        return rows[0] if rows else None

    @classmethod
    def fetch_by_id(
        cls,
        table: str,
        row_id: str | UUID,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """Fetch a row by primary key."""
        return cls.fetch_one(table, "id", cls._normalize_uuid(row_id), columns)

    @staticmethod
    def quote_filter_value(value: str) -> str:
        """
        Quote a value for use inside a PostgREST or() filter string.

        Commas, dots and parentheses are reserved in filter strings, so values
        are wrapped in double quotes with quotes and backslashes escaped.
        """
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    @classmethod
    def ping(cls) -> bool:
        """
        Check that the database answers a trivial query.

        Returns:
            True if a one-row read on the users table succeeds
        """
        try:
            client = cls.get_client()
            client.table("users").select("id").limit(1).execute()
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False
