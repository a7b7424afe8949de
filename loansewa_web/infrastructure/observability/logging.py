"""Structured JSON logging for production observability"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from loansewa_web.config import settings

# Bound per page view by RequestIDMiddleware
current_request_id: ContextVar[str | None] = ContextVar("current_request_id", default=None)


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_backend_call(endpoint: str, outcome: str, duration_ms: float, status_code: int | None = None) -> None:
    """Log one backend API round trip"""
    logging.getLogger("loansewa_web.backend").info(
        "Backend call completed",
        extra={
            "request_id": current_request_id.get(),
            "endpoint": endpoint,
            "outcome": outcome,
            "status_code": status_code,
            "duration_ms": duration_ms,
        },
    )


def log_admin_action(
    request_id: str,
    admin_id: str,
    action: str,
    target_id: str,
    succeeded: bool,
) -> None:
    """Log structured admin workflow outcome for audit"""
    logging.info(
        "Admin action completed",
        extra={
            "request_id": request_id,
            "admin_id": admin_id,
            "step": action,
            "target_id": target_id,
            "outcome": "ok" if succeeded else "error",
        },
    )
