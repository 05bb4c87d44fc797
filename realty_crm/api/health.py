"""
Health check endpoints.

These endpoints help monitor if the application is running correctly.
"""

from fastapi import APIRouter, Request, Response, status
from typing import Dict, Any
import logging

from realty_crm.db.database import check_connection

router = APIRouter(prefix="/health", tags=["health"])

logger = logging.getLogger(__name__)


@router.get("/healthz")
async def health_check() -> Dict[str, str]:
    """
    Basic health check - "Is the app alive?"

    Always returns 200 if the process can respond; no dependencies are
    checked.
    """
    logger.debug("Health check called")
    return {
        "status": "healthy",
        "service": "realty-crm"
    }


@router.get("/readyz")
async def readiness_check(request: Request, response: Response) -> Dict[str, Any]:
    """
    Readiness check - "Can the app actually handle requests?"

    Example response when NOT ready:
        {
            "status": "not_ready",
            "checks": {"database": false, "view_state": true}
        }
    """
    logger.debug("Readiness check called")

    checks = {
        "database": check_connection(request.app.state.session_factory),
        "view_state": request.app.state.view_state.snapshot.loaded_at is not None,
    }
    is_ready = all(checks.values())

    if not is_ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning(f"App not ready - failed checks: {[k for k, v in checks.items() if not v]}")

    return {
        "status": "ready" if is_ready else "not_ready",
        "checks": checks
    }
