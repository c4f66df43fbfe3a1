"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from alert_ledger.domain.models import AssemblyResult


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "alert-ledger"


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


def log_alert_outcome(
    request_id: str,
    result: AssemblyResult,
    duration_ms: float,
) -> None:
    """Log structured alert outcome for analysis. Raw alert text is never logged."""
    rejection_kind: Optional[str] = None
    reason: Optional[str] = None
    amount: Optional[float] = None

    if result.rejection is not None:
        rejection_kind = result.rejection.kind.value
        reason = result.rejection.reason
    if result.transaction is not None:
        amount = result.transaction.amount

    logging.info(
        "Alert processed",
        extra={
            "request_id": request_id,
            "step": "alert_complete",
            "alert_outcome": "accepted" if result.accepted else "rejected",
            "rejection_kind": rejection_kind,
            "reason": reason,
            "amount": amount,
            "duration_ms": duration_ms,
        },
    )
