"""Prometheus metrics for monitoring arrears, payment intake and reminder delivery"""

from prometheus_client import Counter, Histogram, Gauge
from society_ledger.domain.models import DueCalculationResult

# Due metrics
due_calculation_counter = Counter(
    "society_due_calculations_total",
    "Total maintenance due calculations run",
)

overdue_residents_gauge = Gauge(
    "society_overdue_residents",
    "Residents overdue on maintenance as of the last calculation",
)

overdue_days_histogram = Histogram(
    "society_overdue_days",
    "Overdue days per resident",
    buckets=[7, 30, 60, 90, 180, 365],
)

# Payment metrics
payment_recorded_counter = Counter(
    "society_payments_recorded_total",
    "Payments recorded",
    ["category_id"],
)

# Reminder webhook metrics
reminder_webhook_latency_histogram = Histogram(
    "reminder_webhook_latency_seconds",
    "Reminder webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

reminder_webhook_failure_counter = Counter(
    "reminder_webhook_failures_total",
    "Failed reminder webhook deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_due_calculation(result: DueCalculationResult) -> None:
    """Record the outcome of a due calculation"""
    due_calculation_counter.inc()
    overdue_residents_gauge.set(result.total_overdue_users)

    for due in result.users_with_due:
        overdue_days_histogram.observe(due.overdue_days)
