"""Observability API endpoints.

Provides metrics, health checks, and readiness probes for monitoring.
"""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from ..database import get_db
from .health import probe_database

router = APIRouter(tags=["Observability"])


@router.get("/metrics", include_in_schema=False)
def metrics():
    """Expose Prometheus metrics in the text exposition format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


@router.get(
    "/health",
    summary="Health check endpoint",
    description="Returns health status of system components (database)",
)
def health_check(db: Session = Depends(get_db)):
    """200 while the database answers, 503 otherwise."""
    database = probe_database(db)
    return JSONResponse(
        content={
            "status": database.status,
            "components": {
                "database": {
                    "status": database.status,
                    "message": database.message,
                    "latency_ms": database.latency_ms,
                },
            },
        },
        status_code=200 if database.healthy else 503,
    )


@router.get("/ready", summary="Readiness check endpoint")
def readiness_check(db: Session = Depends(get_db)):
    """Report whether the application can serve traffic (database reachable)."""
    database = probe_database(db)

    if database.healthy:
        return {
            "status": "ready",
            "message": "Application is ready to serve traffic"
        }
    return JSONResponse(
        content={"status": "not_ready", "message": database.message},
        status_code=503
    )
