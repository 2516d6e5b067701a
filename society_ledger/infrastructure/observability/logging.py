"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding timestamp, level and service name to every record"""

    def __init__(self, *args, service_name: str = "society-ledger", **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "society-ledger") -> None:
    """Configure structured JSON logging on the root logger"""
    logger = logging.getLogger()
    logger.setLevel(level)

    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s", service_name=service_name)
    )
    logger.addHandler(handler)


def log_due_calculation(
    request_id: str,
    total_overdue_users: int,
    average_overdue_days: int,
    duration_ms: float,
) -> None:
    """Log structured due calculation outcome"""
    logging.info(
        "Due calculation completed",
        extra={
            "request_id": request_id,
            "step": "due_calculation_complete",
            "total_overdue_users": total_overdue_users,
            "average_overdue_days": average_overdue_days,
            "duration_ms": duration_ms,
        },
    )
