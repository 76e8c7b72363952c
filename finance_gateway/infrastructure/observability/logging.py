"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from finance_gateway.config import settings


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

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_transaction_created(
    request_id: str,
    owner_id: str,
    count: int,
    total_amount: float,
    benefit_used: bool,
    remaining: Optional[float],
    duration_ms: float,
) -> None:
    """Log a committed transaction batch (single or installment group)"""
    logging.info(
        "Transactions created",
        extra={
            "request_id": request_id,
            "owner_id": owner_id,
            "step": "transaction_created",
            "transaction_count": count,
            "total_amount": total_amount,
            "benefit_used": benefit_used,
            "benefit_remaining": remaining,
            "duration_ms": duration_ms,
        },
    )


def log_benefit_deduction(
    request_id: str,
    owner_id: str,
    outcome: str,
    amount: float,
    remaining: Optional[float],
    shortfall: float = 0.0,
) -> None:
    """Log a benefit ledger outcome, including rejected deductions"""
    log = logging.info if outcome == "ok" else logging.warning
    log(
        "Benefit deduction",
        extra={
            "request_id": request_id,
            "owner_id": owner_id,
            "step": "benefit_deduction",
            "outcome": outcome,
            "amount": amount,
            "remaining": remaining,
            "shortfall": shortfall,
        },
    )


def log_stats_computed(request_id: str, owner_id: str, report: str, duration_ms: float) -> None:
    logging.info(
        "Report computed",
        extra={
            "request_id": request_id,
            "owner_id": owner_id,
            "step": "report_computed",
            "report": report,
            "duration_ms": duration_ms,
        },
    )
