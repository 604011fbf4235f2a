"""Logging setup: one stdout handler, JSON lines in deployed environments.

Every record carries the request id of the request that produced it. The
domain services pass actor, document and assignment ids through ``extra``;
those keys are lifted into the JSON payload.
"""

import json
import logging
import sys
from datetime import datetime, timezone

from .request_id import get_request_id

# ``extra`` keys copied into the JSON payload
_EXTRA_FIELDS = (
    "actor_id",
    "document_id",
    "assignment_id",
    "action",
    "from_status",
    "to_status",
    "status_code",
    "duration_ms",
    "method",
    "path",
)

_TEXT_FORMAT = "%(asctime)s %(levelname)-7s [%(request_id)s] %(name)s: %(message)s"


class RequestIDFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", None),
            "message": record.getMessage(),
        }
        payload.update({key: getattr(record, key) for key in _EXTRA_FIELDS if hasattr(record, key)})
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Route all logging to stdout at ``level``, as JSON or plain text."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(_TEXT_FORMAT))
    handler.addFilter(RequestIDFilter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())

    for noisy in ("uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
