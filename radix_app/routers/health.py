"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from radix_app.database import get_db, ping_database
from radix_app.dependencies import get_session_registry
from radix_app.services.session_ledger import SessionRegistry

router = APIRouter(tags=["health"])

SERVICE_NAME = "radix-converter-api"


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": SERVICE_NAME,
    }


@router.get("/health/detailed")
async def detailed_health_check(
    db: Session = Depends(get_db),
    registry: SessionRegistry = Depends(get_session_registry),
) -> dict[str, str | dict[str, str]]:
    """Detailed health check including database connectivity and live sessions."""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": SERVICE_NAME,
        "checks": {"active_sessions": str(registry.active_session_count())},
    }

    try:
        ping_database(db)
        health_status["checks"]["database"] = "healthy"
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = f"unhealthy: {e!s}"

    return health_status
