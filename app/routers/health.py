# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# Both paths run the same database connectivity probe.
# =============================================================================

import time
from datetime import datetime, timezone
from urllib.parse import urlparse

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.config import settings
from app.dependencies import SupabaseDep
from app.responses import ApiResponse

router = APIRouter()

_started_at = time.monotonic()

# Reported as meta.dbStateCode / dbStateDescription
DB_STATES = {
    0: "Disconnected",
    1: "Connected",
}


@router.get("/health")
@router.get("/serverHealthCheck")
async def health_check(db: SupabaseDep) -> JSONResponse:
    """
    Health check endpoint.

    Returns 200 when the database answers a trivial query, 500 otherwise.
    """
    connected = db.ping()
    state = 1 if connected else 0

    return ApiResponse.send(
        ApiResponse(
            status_code=200 if connected else 500,
            success=connected,
            message="Database is healthy" if connected else "Database is not connected properly",
            data={
                "status": DB_STATES[state],
                "host": urlparse(settings.SUPABASE_URL).hostname,
                "environment": settings.ENVIRONMENT,
                "uptimeSeconds": round(time.monotonic() - _started_at, 2),
            },
            meta={
                "dbStateCode": state,
                "dbStateDescription": DB_STATES[state],
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
    )
