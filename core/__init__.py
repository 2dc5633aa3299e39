# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the domain logic:
# - models/: Pydantic schemas for users, books and reviews
# - services/: Account, session, catalog and review operations
#
# Routers call services; services talk to Supabase through lib/.
# =============================================================================
