#!/usr/bin/env python3
# =============================================================================
# scripts/start_server.py - API Server Entry Point
# =============================================================================
# Starts the Book Review API with uvicorn.
#
# Usage:
#   python scripts/start_server.py
#
#   # Or use uvicorn directly
#   uvicorn app.main:app --reload
#
# Prerequisites:
#   - Environment variables must be set (.env file)
#   - supabase/migrations/001_init.sql applied to the database
# =============================================================================

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import uvicorn

from app.config import settings


def main():
    """Start the API server."""
    print("=" * 60)
    print("Book Review API")
    print("=" * 60)
    print()
    print(f"Listening on http://{settings.API_HOST}:{settings.API_PORT}")
    print("Press Ctrl+C to stop")
    print()

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    main()
