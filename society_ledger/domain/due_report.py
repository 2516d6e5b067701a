"""Presentation policy for due records: severity tiers, sorting, filtering, status counts"""

from datetime import date
from typing import List
from society_ledger.domain.models import MaintenanceDue, MaintenanceStatus

SORT_KEYS = ("overdue_days", "user_name", "house_number", "last_paid_period_end")


def classify_severity(overdue_days: int, critical_days: int = 90, warning_days: int = 30) -> str:
    """
    Map overdue days to a display tier.

    Thresholds are exclusive: 90 days is still "warning", 91 is "critical".
    """
    if overdue_days > critical_days:
        return "critical"
    elif overdue_days > warning_days:
        return "warning"
    else:
        return "notice"


def filter_by_name(dues: List[MaintenanceDue], search: str | None) -> List[MaintenanceDue]:
    """Case-insensitive substring match on resident name; blank search keeps everything"""
    if not search or not search.strip():
        return list(dues)

    needle = search.strip().lower()
    return [d for d in dues if needle in (d.user_name or "").lower()]


def sort_dues(
    dues: List[MaintenanceDue],
    sort_by: str = "overdue_days",
    descending: bool = True,
) -> List[MaintenanceDue]:
    """
    Sort due records for display. Default is most overdue first.

    Records without a last paid period end sort as the oldest possible date.
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unsupported sort key: {sort_by}")

    if sort_by == "last_paid_period_end":
        key = lambda d: d.last_paid_period_end or date.min
    elif sort_by == "overdue_days":
        key = lambda d: d.overdue_days
    else:
        key = lambda d: (getattr(d, sort_by) or "").lower()

    return sorted(dues, key=key, reverse=descending)


def summarize_maintenance_status(active_residents: int, total_overdue_users: int) -> MaintenanceStatus:
    """Split active residents into paid and overdue; paid never goes negative"""
    return MaintenanceStatus(
        paid=max(0, active_residents - total_overdue_users),
        overdue=total_overdue_users,
    )
