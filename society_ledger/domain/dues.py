"""Maintenance due calculation engine - arrears from payment period coverage"""

from datetime import date, datetime
from typing import Dict, List, Optional
from society_ledger.domain.models import PaymentPeriod, MaintenanceDue, DueCalculationResult

# Payment category reserved for maintenance dues
MAINTENANCE_CATEGORY_ID = 1

# Fixed month length used for display and month buckets (not calendar-accurate)
DAYS_PER_MONTH = 30


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_duration(days: int) -> str:
    """
    Render a day count as a human-readable duration.

    Months are a flat 30 days, so 61 days is "2 months, 1 day" regardless of
    the calendar. Zero or negative input renders as "0 days".
    """
    if days <= 0:
        return "0 days"

    months = days // DAYS_PER_MONTH
    remaining_days = days % DAYS_PER_MONTH

    if months == 0:
        return _plural(remaining_days, "day")

    if remaining_days == 0:
        return _plural(months, "month")

    return f"{_plural(months, 'month')}, {_plural(remaining_days, 'day')}"


def _as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


def is_valid_payment_period(payment: PaymentPeriod) -> bool:
    """True when both period dates are present and the period does not end before it starts"""
    if payment.period_start is None or payment.period_end is None:
        return False

    return _as_date(payment.period_end) >= _as_date(payment.period_start)


def calculate_user_due(
    user_id: str,
    user_name: str,
    house_number: str,
    payments: List[PaymentPeriod],
    as_of: date | None = None,
    maintenance_category_id: int = MAINTENANCE_CATEGORY_ID,
) -> Optional[MaintenanceDue]:
    """
    Calculate a single resident's maintenance arrears.

    Requirements:
    - Only maintenance-category payments count; none at all means the resident
      is not tracked (None), which is distinct from being paid up
    - Invalid periods (missing bound or end before start) are ignored
    - The latest period end decides coverage; ties keep the first record seen
    - Coverage ending today or later is not overdue

    Args:
        user_id, user_name, house_number: Identity copied into the result
        payments: All of the resident's payment periods, any category, any order
        as_of: Evaluation date (default: today)
        maintenance_category_id: Category tracked for dues

    Returns:
        MaintenanceDue when overdue_days > 0, otherwise None
    """
    maintenance_payments = [p for p in payments if p.category_id == maintenance_category_id]
    if not maintenance_payments:
        return None

    valid_payments = [p for p in maintenance_payments if is_valid_payment_period(p)]
    if not valid_payments:
        return None

    latest_payment = max(valid_payments, key=lambda p: _as_date(p.period_end))
    last_paid_period_end = _as_date(latest_payment.period_end)

    today = _as_date(as_of) if as_of is not None else date.today()
    days_diff = (today - last_paid_period_end).days

    if days_diff <= 0:
        return None

    return MaintenanceDue(
        user_id=user_id,
        user_name=user_name,
        house_number=house_number,
        last_paid_period_end=last_paid_period_end,
        overdue_days=days_diff,
        overdue_months=days_diff // DAYS_PER_MONTH,
        formatted_duration=format_duration(days_diff),
    )


def calculate_all_maintenance_due(
    payments: List[PaymentPeriod],
    as_of: date | None = None,
    maintenance_category_id: int = MAINTENANCE_CATEGORY_ID,
) -> DueCalculationResult:
    """
    Main entry point: group payment rows by resident and collect overdue residents.

    Display fields (name, house number) come from the first row seen for each
    resident. Output order follows first appearance in the input; callers sort.
    """
    if as_of is None:
        as_of = date.today()

    # Group by resident, keeping first-seen identity
    grouped: Dict[str, Dict] = {}
    for payment in payments:
        if payment.user_id not in grouped:
            grouped[payment.user_id] = {
                "user_name": payment.user_name,
                "house_number": payment.house_number,
                "payments": [],
            }
        grouped[payment.user_id]["payments"].append(payment)

    users_with_due = []
    for user_id, group in grouped.items():
        due = calculate_user_due(
            user_id,
            group["user_name"],
            group["house_number"],
            group["payments"],
            as_of=as_of,
            maintenance_category_id=maintenance_category_id,
        )
        if due is not None:
            users_with_due.append(due)

    total_overdue_users = len(users_with_due)
    total_overdue_days = sum(d.overdue_days for d in users_with_due)

    # Mean rounded half-up in integer arithmetic (round() would round half to even)
    average_overdue_days = (
        (2 * total_overdue_days + total_overdue_users) // (2 * total_overdue_users)
        if total_overdue_users > 0
        else 0
    )

    return DueCalculationResult(
        users_with_due=users_with_due,
        total_overdue_users=total_overdue_users,
        average_overdue_days=average_overdue_days,
    )
