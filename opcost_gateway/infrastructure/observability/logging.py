"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Sequence
from pythonjsonlogger import jsonlogger

from opcost_gateway.config import settings
from opcost_gateway.domain.models import SettlementWarning


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


def log_settlement(
    request_id: str,
    property_id: str,
    year: int,
    settlement_count: int,
    owner_vacancy_share_cents: int,
    unallocated_cents: int,
    duration_ms: float,
) -> None:
    """Log structured settlement outcome for analysis"""
    logging.info(
        "Settlement calculated",
        extra={
            "request_id": request_id,
            "property_id": property_id,
            "year": year,
            "step": "settlement_complete",
            "settlement_count": settlement_count,
            "owner_vacancy_share_cents": owner_vacancy_share_cents,
            "unallocated_cents": unallocated_cents,
            "duration_ms": duration_ms,
        },
    )


def log_warnings(request_id: str, property_id: str, warnings: Sequence[SettlementWarning]) -> None:
    """One WARNING record per degraded input found by the engine"""
    for warning in warnings:
        logging.warning(
            warning.message,
            extra={
                "request_id": request_id,
                "property_id": property_id,
                "warning_code": warning.code,
                "expense_id": warning.expense_id,
                "tenancy_id": warning.tenancy_id,
            },
        )
