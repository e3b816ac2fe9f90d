"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

from affordability_gateway.domain.models import EgiQuote, LoanQuote


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service_name: str = "affordability-gateway", **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "affordability-gateway") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_quote(request_id: str, quote: LoanQuote, duration_ms: float) -> None:
    """Log structured financing quote outcome for analysis"""
    logging.info(
        "Loan quote completed",
        extra={
            "request_id": request_id,
            "step": "loan_quote_complete",
            "mode": quote.mode.value,
            "bracket_index": quote.bracket_index,
            "nominal_rate": str(quote.nominal_rate),
            "amortization_system": quote.amortization_system.value,
            "financed_amount": str(quote.financed_amount),
            "was_capped": quote.was_capped,
            "duration_ms": duration_ms,
        },
    )


def log_egi_quote(request_id: str, quote: EgiQuote, duration_ms: float) -> None:
    """Log structured equity-release outcome, including the rejection reason"""
    logging.info(
        "EGI quote completed",
        extra={
            "request_id": request_id,
            "step": "egi_quote_complete",
            "scenario": quote.scenario.value,
            "outcome": "rejected" if quote.rejected else "approved",
            "rejection_reason": quote.error,
            "max_financeable": str(quote.max_financeable),
            "duration_ms": duration_ms,
        },
    )
