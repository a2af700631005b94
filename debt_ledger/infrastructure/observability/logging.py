"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "debt-ledger"


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


def log_payment(
    request_id: str,
    debt_id: str,
    installment_id: str,
    paid_amount: int,
    outcome: str,
    future_count: int,
    fully_paid: bool,
    duration_ms: float,
) -> None:
    """Log structured payment outcome for reconciliation audits"""
    logging.info(
        "Payment recorded",
        extra={
            "request_id": request_id,
            "debt_id": debt_id,
            "installment_id": installment_id,
            "step": "payment_recorded",
            "payment_outcome": outcome,
            "paid_amount": paid_amount,
            "future_count": future_count,
            "fully_paid": fully_paid,
            "duration_ms": duration_ms,
        },
    )


def log_ledger_command(
    request_id: str,
    command: str,
    revision: int,
    entity_id: Optional[str] = None,
) -> None:
    """Log a committed ledger command with the revision it produced"""
    logging.info(
        "Ledger command committed",
        extra={
            "request_id": request_id,
            "step": "ledger_command",
            "command": command,
            "entity_id": entity_id,
            "revision": revision,
        },
    )
