"""Database probe behind /health and /ready."""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@dataclass
class DatabaseProbe:
    healthy: bool
    message: str
    latency_ms: Optional[float] = None

    @property
    def status(self) -> str:
        return "healthy" if self.healthy else "unhealthy"


def probe_database(db: Session) -> DatabaseProbe:
    """Run ``SELECT 1`` and time it. Never raises for database errors."""
    started = time.perf_counter()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database probe failed: {e}")
        return DatabaseProbe(healthy=False, message="Database unreachable")
    return DatabaseProbe(
        healthy=True,
        message="Database connection OK",
        latency_ms=round((time.perf_counter() - started) * 1000, 2),
    )
