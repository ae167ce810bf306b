"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from velocity_limits.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO", stream=None) -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler, stdout unless the caller needs stdout for data
    handler = logging.StreamHandler(stream or sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_load_decision(
    request_id: str,
    load_id: int,
    customer_id: int,
    outcome: str,
    rejection_reason: Optional[str],
    duration_ms: float,
) -> None:
    """Log structured load decision outcome for analysis"""
    logging.info(
        "Load decision completed",
        extra={
            "request_id": request_id,
            "load_id": load_id,
            "customer_id": customer_id,
            "step": "load_decision_complete",
            "outcome": outcome,
            "rejection_reason": rejection_reason,
            "duration_ms": duration_ms,
        },
    )
