"""
Health check endpoints
"""

import logging
from typing import Dict, Any

from fastapi import APIRouter, HTTPException, Request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check() -> Dict[str, Any]:
    """Basic health check for load balancers"""
    return {"status": "healthy", "service": "unmatched-stats-api"}


@router.get("/ready")
async def readiness_check(request: Request) -> Dict[str, Any]:
    """
    Readiness check: the document store must be reachable.
    Connects on first use, so this also warms up the connection.
    """
    cosmos_db = request.app.state.cosmos_db
    try:
        if not cosmos_db.is_connected:
            await cosmos_db.connect()
        health_status = await cosmos_db.health_check()
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        raise HTTPException(status_code=503, detail=f"Database unavailable: {e}")

    if health_status["status"] != "healthy":
        raise HTTPException(status_code=503, detail=health_status.get("error", "Database unhealthy"))
    return health_status
