"""
Health check endpoints for the Account Service
"""
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from datetime import datetime
from typing import Any, Dict

from ..db import check_db_connection

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Returns:
        dict: Health status and timestamp
    """
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat()
    }


@router.get("/ready")
def readiness_check():
    """Readiness check; 503 when the database cannot be reached."""
    db_connected = check_db_connection()
    return JSONResponse(
        status_code=status.HTTP_200_OK if db_connected else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if db_connected else "not_ready",
            "database": "connected" if db_connected else "disconnected",
            "timestamp": datetime.utcnow().isoformat()
        }
    )
