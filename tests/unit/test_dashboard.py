"""Unit tests for the dashboard summary"""

from datetime import date
from decimal import Decimal
from society_ledger.domain.models import LedgerEntry
from society_ledger.domain.dashboard import (
    build_dashboard_summary,
    monthly_trend,
    recent_transactions,
    totals_by_category,
    trailing_months,
)

AS_OF = date(2024, 3, 15)


def payment(amount, on, category="Maintenance", party="Asha Rao", entry_id="p"):
    return LedgerEntry(
        id=entry_id,
        kind="payment",
        amount=Decimal(amount),
        entry_date=on,
        category_name=category,
        party=party,
    )


def expense(amount, on, category="Electricity", entry_id="e"):
    return LedgerEntry(id=entry_id, kind="expense", amount=Decimal(amount), entry_date=on, category_name=category)


def test_trailing_months_cross_year_boundary():
    assert trailing_months(AS_OF) == ["2023-10", "2023-11", "2023-12", "2024-01", "2024-02", "2024-03"]


def test_monthly_trend_fills_empty_months():
    trend = monthly_trend(
        [payment("1500", date(2024, 3, 2)), payment("1500", date(2024, 1, 5)), payment("900", date(2023, 1, 1))],
        [expense("400", date(2024, 3, 10))],
        AS_OF,
    )

    assert len(trend) == 6
    by_month = {m.month: m for m in trend}
    assert by_month["2024-03"].payments == Decimal("1500")
    assert by_month["2024-03"].expenses == Decimal("400")
    assert by_month["2024-03"].net_balance == Decimal("1100")
    assert by_month["2024-01"].net_balance == Decimal("1500")
    assert by_month["2023-12"].payments == Decimal("0")


def test_entries_without_date_count_in_totals_only():
    summary = build_dashboard_summary([payment("100", None)], [], as_of=AS_OF)

    assert summary.total_payments == Decimal("100")
    assert all(m.payments == 0 for m in summary.monthly)


def test_totals_by_category_drops_zero_and_ranks():
    totals = totals_by_category(
        [
            payment("100", AS_OF, category="Festival Fund"),
            payment("1500", AS_OF),
            payment("500", AS_OF),
            payment("0", AS_OF, category="Parking"),
            payment("50", AS_OF, category=None),
        ]
    )

    assert [(t.category, t.amount) for t in totals] == [
        ("Maintenance", Decimal("2000")),
        ("Festival Fund", Decimal("100")),
        ("Uncategorized", Decimal("50")),
    ]


def test_recent_transactions_merge_and_cap():
    payments = [payment("10", date(2024, 3, d), entry_id=f"p{d}", party=None) for d in range(1, 13)]
    expenses = [expense("5", date(2024, 2, d), entry_id=f"e{d}") for d in range(1, 8)]

    feed = recent_transactions(payments, expenses)

    assert len(feed) == 8
    assert [t.id for t in feed] == ["p12", "p11", "p10", "p9", "p8", "p7", "p6", "p5"]
    assert all(t.party == "Unknown User" for t in feed)


def test_recent_transactions_label_expenses_as_society():
    feed = recent_transactions(
        [payment("10", date(2024, 3, 1), entry_id="p1")],
        [expense("5", date(2024, 3, 9), entry_id="e1")],
    )

    assert [(t.id, t.party) for t in feed] == [("e1", "Society"), ("p1", "Asha Rao")]


def test_build_dashboard_summary():
    summary = build_dashboard_summary(
        [payment("1500", date(2024, 3, 1)), payment("1500", date(2024, 2, 1))],
        [expense("2000", date(2024, 3, 5)), expense("300", date(2023, 6, 1), category="Security")],
        as_of=AS_OF,
    )

    assert summary.total_payments == Decimal("3000")
    assert summary.total_expenses == Decimal("2300")
    assert summary.net_balance == Decimal("700")
    assert summary.monthly_net_balance == Decimal("-500")
    assert [c.category for c in summary.expenses_by_category] == ["Electricity", "Security"]
    assert len(summary.recent_transactions) == 4


def test_empty_dashboard():
    summary = build_dashboard_summary([], [], as_of=AS_OF)

    assert summary.net_balance == 0
    assert summary.monthly_net_balance == 0
    assert summary.payments_by_category == []
    assert summary.recent_transactions == []
