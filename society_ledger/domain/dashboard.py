"""
Dashboard summary of society finances.

Pure functions over LedgerEntry rows; the API layer loads the rows and
supplies "today" so results are deterministic in tests.
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
from society_ledger.domain.models import LedgerEntry, MonthlyTotals, CategoryTotal, DashboardSummary

TREND_MONTHS = 6
RECENT_PAYMENTS = 10
RECENT_EXPENSES = 5
RECENT_LIMIT = 8

UNCATEGORIZED = "Uncategorized"
UNKNOWN_PAYER = "Unknown User"
SOCIETY_PARTY = "Society"

ZERO = Decimal("0")


def _total(entries: List[LedgerEntry]) -> Decimal:
    return sum((e.amount for e in entries), ZERO)


def month_key(value: date) -> str:
    return value.strftime("%Y-%m")


def trailing_months(as_of: date, months: int = TREND_MONTHS) -> List[str]:
    """YYYY-MM keys of the `months` calendar months ending with as_of's month, oldest first"""
    keys = []
    year, month = as_of.year, as_of.month
    for _ in range(months):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


def monthly_trend(
    payments: List[LedgerEntry],
    expenses: List[LedgerEntry],
    as_of: date,
    months: int = TREND_MONTHS,
) -> List[MonthlyTotals]:
    """
    Per-month payments, expenses and net balance.

    Every month in the window is present, even with no activity. Entries
    without a date or outside the window are ignored.
    """
    keys = trailing_months(as_of, months)
    paid: Dict[str, Decimal] = {k: ZERO for k in keys}
    spent: Dict[str, Decimal] = {k: ZERO for k in keys}

    for entry in payments:
        if entry.entry_date and month_key(entry.entry_date) in paid:
            paid[month_key(entry.entry_date)] += entry.amount
    for entry in expenses:
        if entry.entry_date and month_key(entry.entry_date) in spent:
            spent[month_key(entry.entry_date)] += entry.amount

    return [
        MonthlyTotals(month=k, payments=paid[k], expenses=spent[k], net_balance=paid[k] - spent[k])
        for k in keys
    ]


def totals_by_category(entries: List[LedgerEntry]) -> List[CategoryTotal]:
    """Category totals above zero, largest first"""
    totals: Dict[str, Decimal] = {}
    for entry in entries:
        name = entry.category_name or UNCATEGORIZED
        totals[name] = totals.get(name, ZERO) + entry.amount

    ranked = [CategoryTotal(category=name, amount=amount) for name, amount in totals.items() if amount > 0]
    return sorted(ranked, key=lambda c: c.amount, reverse=True)


def _newest_first(entries: List[LedgerEntry]) -> List[LedgerEntry]:
    return sorted(entries, key=lambda e: e.entry_date or date.min, reverse=True)


def recent_transactions(
    payments: List[LedgerEntry],
    expenses: List[LedgerEntry],
    limit: int = RECENT_LIMIT,
) -> List[LedgerEntry]:
    """Latest payments and expenses merged into one feed with display names filled in"""
    latest_payments = [
        replace(p, party=p.party or UNKNOWN_PAYER) for p in _newest_first(payments)[:RECENT_PAYMENTS]
    ]
    latest_expenses = [replace(e, party=SOCIETY_PARTY) for e in _newest_first(expenses)[:RECENT_EXPENSES]]

    return _newest_first(latest_payments + latest_expenses)[:limit]


def build_dashboard_summary(
    payments: List[LedgerEntry],
    expenses: List[LedgerEntry],
    as_of: Optional[date] = None,
) -> DashboardSummary:
    """
    Summarize society finances as of a date.

    Args:
        payments: Every recorded payment
        expenses: Every recorded expense
        as_of: Reference day for the monthly window (defaults to today)

    Returns:
        DashboardSummary with all-time totals, the current month's net
        balance, a six-month trend, category splits and recent activity
    """
    today = as_of or date.today()

    total_payments = _total(payments)
    total_expenses = _total(expenses)
    trend = monthly_trend(payments, expenses, today)

    return DashboardSummary(
        total_payments=total_payments,
        total_expenses=total_expenses,
        net_balance=total_payments - total_expenses,
        monthly_net_balance=trend[-1].net_balance,
        monthly=trend,
        payments_by_category=totals_by_category(payments),
        expenses_by_category=totals_by_category(expenses),
        recent_transactions=recent_transactions(payments, expenses),
    )
