"""Structured Logging — JSON formatter, setup, and per-request access log.

Invariants:
    - Every record carries timestamp, level, logger and message
    - Request and entity fields (path, status_code, user_id, ...) are copied from
      `extra=` when present, never invented
    - setup_logging is idempotent: calling it twice does not duplicate output

Design Decisions:
    - setup_logging runs once per process from the lifespan
    - Access log is a plain HTTP middleware writing one line after each response
"""

import json
import logging
import time
from datetime import datetime, timezone

from fastapi import Request

access_logger = logging.getLogger("inkwell.access")

REQUEST_FIELDS = ("method", "path", "status_code", "duration_ms")
ENTITY_FIELDS = ("error_code", "user_id", "post_id")

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update({
            key: getattr(record, key)
            for key in REQUEST_FIELDS + ENTITY_FIELDS
            if getattr(record, key, None) is not None
        })
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install a single root handler in the requested format."""
    handler = logging.StreamHandler()
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT),
    )
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    # the access middleware replaces uvicorn's own access line
    logging.getLogger("uvicorn.access").propagate = False


async def log_requests(request: Request, call_next):
    """HTTP middleware: method, path, status and duration of every request."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
    access_logger.info(
        "%s %s -> %d (%.2f ms)",
        request.method, request.url.path, response.status_code, elapsed_ms,
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": elapsed_ms,
        },
    )
    return response
