"""Health & Readiness Checks — is the process up, and can it reach the record store.

Invariants:
    - GET /health/ answers 200 whenever the event loop is serving requests; it
      touches neither the database nor the public assets directory
    - GET /health/ready answers 200 only when a SELECT 1 round-trips through the
      same session manager the repositories use; otherwise 503 with a reason
    - Readiness is decided on every call, nothing is cached
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import app.infrastructure.database as db_module

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "drinkreview-api"


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": SERVICE_NAME, "version": "1.0.0"}


@router.get("/ready")
async def readiness_check():
    """Users, reviews and drinks all live in one database, so one check covers them."""
    manager = db_module.db_manager
    if manager is None:
        reason = "database_not_initialized"
    elif not await manager.health_check():
        reason = "database_unavailable"
    else:
        return {"status": "ready", "checks": {"record_store": "healthy"}}
    logger.warning(f"Readiness check failed: {reason}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )
