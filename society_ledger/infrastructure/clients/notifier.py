"""Reminder webhook client with exponential backoff retry logic"""

import asyncio
import logging
import httpx
from typing import Dict, Any
from society_ledger.config import settings
from society_ledger.domain.exceptions import ReminderDeliveryError
from society_ledger.domain.models import MaintenanceDue
from society_ledger.infrastructure.observability.metrics import (
    reminder_webhook_latency_histogram,
    reminder_webhook_failure_counter,
)


def build_overdue_event(due: MaintenanceDue) -> Dict[str, Any]:
    """Webhook payload for an overdue resident"""
    return {
        "event": "MAINTENANCE_OVERDUE",
        "user_id": due.user_id,
        "user_name": due.user_name,
        "house_number": due.house_number,
        "last_paid_period_end": due.last_paid_period_end.isoformat() if due.last_paid_period_end else None,
        "overdue_days": due.overdue_days,
        "formatted_duration": due.formatted_duration,
    }


class ReminderClient:
    """Client for pushing overdue reminder events to the notification service"""

    def __init__(
        self,
        webhook_url: str | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
    ):
        self.webhook_url = webhook_url or settings.reminder_webhook_url
        self.timeout = settings.http_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.webhook_max_retries
        self.backoff_base = backoff_base if backoff_base is not None else settings.webhook_backoff_base

    async def send_overdue_reminder(self, payload: Dict[str, Any]) -> None:
        """
        Deliver one reminder event.

        Retry strategy:
        - Exponential backoff: base * 2^(attempt-1) seconds between attempts
        - Retries on HTTP status errors and network failures

        Raises:
            ReminderDeliveryError: After the final failed attempt
        """
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            while attempt < self.max_retries:
                try:
                    with reminder_webhook_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    reminder_webhook_failure_counter.inc()

                    if attempt >= self.max_retries:
                        logging.error(
                            f"Reminder delivery failed: {e}",
                            extra={"user_id": payload.get("user_id"), "attempts": attempt},
                        )
                        raise ReminderDeliveryError(
                            f"Reminder for {payload.get('user_id')} failed after {attempt} attempts"
                        ) from e

                    await asyncio.sleep(self.backoff_base * (2 ** (attempt - 1)))
