# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Book Review API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_tokens.py: JWT signing and verification
# - test_exceptions.py: Response envelope and error translation
# - test_users.py / test_books.py / test_reviews.py: API endpoint tests
#
# Endpoint tests run against an in-memory Supabase (fake_supabase.py).
#
# Run tests with: pytest
# =============================================================================
