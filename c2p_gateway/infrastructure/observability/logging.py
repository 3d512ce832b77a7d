"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from c2p_gateway.domain.errors import NormalizedError, Severity

SERVICE_NAME = "c2p-gateway"

_SEVERITY_LEVELS = {
    Severity.LOW: logging.INFO,
    Severity.MEDIUM: logging.WARNING,
    Severity.HIGH: logging.ERROR,
    Severity.CRITICAL: logging.CRITICAL,
}

logger = logging.getLogger("c2p_gateway.errors")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = SERVICE_NAME


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    root = logging.getLogger()
    root.setLevel(level)

    # Remove existing handlers
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)


def log_gateway_error(error: NormalizedError, context: Optional[Dict[str, Any]] = None) -> None:
    """Log a normalized gateway error as {timestamp, code, message, severity, context}"""
    logger.log(
        _SEVERITY_LEVELS[error.severity],
        "Mercantil API error",
        extra={
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "code": error.code,
            "error_message": error.message,
            "severity": error.severity.value,
            "retryable": error.retryable,
            "context": context or {},
        },
    )


def log_verification(
    request_id: str,
    verification_id: Optional[str],
    outcome: str,
    response_code: Optional[int],
    duration_ms: float,
) -> None:
    """Log structured verification outcome for analysis"""
    logging.info(
        "Verification completed",
        extra={
            "request_id": request_id,
            "verification_id": verification_id,
            "step": "verification_complete",
            "outcome": outcome,
            "response_code": response_code,
            "duration_ms": duration_ms,
        },
    )
