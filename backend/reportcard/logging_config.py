"""
JSON logging for the report-card service and its terminal client.

Every record is printed as one JSON object:

    {"timestamp", "level", "message", "channel", "context", "extra"}

`channel` is the last part of the logger name (reportcard.auth -> auth).
`context.request_id` is filled in by the HTTP middleware; the client and
CLI leave it empty.
"""

import logging
import json
import os
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CHANNELS = ["http", "db", "auth", "grading", "client"]


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class StructuredJsonFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        channel = getattr(record, "channel", None)
        if channel is None:
            channel = record.name.rsplit(".", 1)[-1] if "." in record.name else "app"

        entry = {
            "timestamp": _timestamp(),
            "level": record.levelname,
            "message": record.getMessage(),
            "channel": channel,
            "context": {"request_id": request_id_var.get(""), **(getattr(record, "context", None) or {})},
            "extra": getattr(record, "extra_data", None) or {},
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging() -> logging.Logger:
    """Send everything to stderr as JSON at LOG_LEVEL. Safe to call twice."""
    level = getattr(logging, LOG_LEVEL, logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredJsonFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]

    for channel in CHANNELS:
        get_logger(channel).setLevel(level)
    return root


def get_logger(channel: str) -> logging.Logger:
    return logging.getLogger(f"reportcard.{channel}")


def log_with_context(logger: logging.Logger, level: str, message: str,
                     context: dict = None, extra_data: dict = None):
    """
    Log `message` on `logger` with a business context (student_id, ...)
    and free-form extra data (duration_ms, status_code, ...).
    """
    logger.log(
        getattr(logging, level.upper(), logging.INFO),
        message,
        extra={
            "context": context or {},
            "extra_data": extra_data or {},
            "channel": logger.name.rsplit(".", 1)[-1],
        },
    )


def generate_request_id() -> str:
    return str(uuid.uuid4())
