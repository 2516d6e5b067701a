"""Unit tests for the maintenance due calculation engine"""

import pytest
from datetime import date, datetime, timedelta
from society_ledger.domain.models import PaymentPeriod
from society_ledger.domain.dues import (
    MAINTENANCE_CATEGORY_ID,
    format_duration,
    is_valid_payment_period,
    calculate_user_due,
    calculate_all_maintenance_due,
)

AS_OF = date(2024, 6, 15)


def period(user_id="u1", end=None, start=None, category_id=1, name="Resident", house="A-1"):
    """Payment period helper; start defaults to 30 days before end"""
    if end is not None and start is None:
        start = end - timedelta(days=30)
    return PaymentPeriod(
        user_id=user_id,
        user_name=name,
        house_number=house,
        category_id=category_id,
        period_start=start,
        period_end=end,
    )


@pytest.mark.parametrize(
    "days, expected",
    [
        (0, "0 days"),
        (-5, "0 days"),
        (1, "1 day"),
        (2, "2 days"),
        (29, "29 days"),
        (30, "1 month"),
        (31, "1 month, 1 day"),
        (45, "1 month, 15 days"),
        (60, "2 months"),
        (61, "2 months, 1 day"),
        (62, "2 months, 2 days"),
    ],
)
def test_format_duration(days, expected):
    """Fixed 30-day months with independent pluralization"""
    assert format_duration(days) == expected


def test_is_valid_payment_period():
    assert is_valid_payment_period(period(end=AS_OF)) is True
    # Single-day period
    assert is_valid_payment_period(period(start=AS_OF, end=AS_OF)) is True
    assert is_valid_payment_period(period(start=AS_OF, end=AS_OF - timedelta(days=1))) is False
    assert is_valid_payment_period(PaymentPeriod("u1", "R", "A-1", 1, None, AS_OF)) is False
    assert is_valid_payment_period(PaymentPeriod("u1", "R", "A-1", 1, AS_OF, None)) is False


def test_non_maintenance_only_is_not_tracked():
    """Residents with no maintenance payments are never flagged, whatever the dates"""
    payments = [
        period(end=AS_OF - timedelta(days=400), category_id=2),
        period(end=AS_OF - timedelta(days=5), category_id=3),
    ]
    assert calculate_user_due("u1", "R", "A-1", payments, as_of=AS_OF) is None


def test_period_ending_today_is_not_overdue():
    payments = [period(end=AS_OF)]
    assert calculate_user_due("u1", "R", "A-1", payments, as_of=AS_OF) is None


def test_period_ending_yesterday_is_one_day_overdue():
    payments = [period(end=AS_OF - timedelta(days=1))]
    due = calculate_user_due("u1", "R", "A-1", payments, as_of=AS_OF)

    assert due is not None
    assert due.overdue_days == 1
    assert due.overdue_months == 0
    assert due.formatted_duration == "1 day"


def test_future_coverage_is_not_overdue():
    payments = [period(start=AS_OF, end=AS_OF + timedelta(days=90))]
    assert calculate_user_due("u1", "R", "A-1", payments, as_of=AS_OF) is None


def test_latest_period_end_wins_regardless_of_order():
    """Greatest period end decides, not list order or payment date"""
    older = period(end=AS_OF - timedelta(days=100))
    older.payment_date = AS_OF  # Paid most recently, but covers an older period
    newer = period(end=AS_OF - timedelta(days=10))
    newer.payment_date = AS_OF - timedelta(days=200)

    for payments in ([older, newer], [newer, older]):
        due = calculate_user_due("u1", "R", "A-1", payments, as_of=AS_OF)
        assert due.last_paid_period_end == AS_OF - timedelta(days=10)
        assert due.overdue_days == 10


def test_invalid_periods_are_ignored():
    """Inverted or incomplete periods behave as if absent"""
    inverted = period(start=AS_OF - timedelta(days=1), end=AS_OF - timedelta(days=40))
    missing_start = PaymentPeriod("u1", "R", "A-1", 1, None, AS_OF - timedelta(days=2))
    valid = period(end=AS_OF - timedelta(days=50))

    due = calculate_user_due("u1", "R", "A-1", [inverted, missing_start, valid], as_of=AS_OF)
    assert due.overdue_days == 50

    assert calculate_user_due("u1", "R", "A-1", [inverted, missing_start], as_of=AS_OF) is None


def test_overdue_months_use_thirty_day_buckets():
    due = calculate_user_due("u1", "R", "A-1", [period(end=AS_OF - timedelta(days=89))], as_of=AS_OF)
    assert due.overdue_months == 2
    assert due.formatted_duration == "2 months, 29 days"


def test_datetime_inputs_are_compared_by_calendar_day():
    """Time of day never adds or removes an overdue day"""
    end = datetime(2024, 6, 14, 23, 59)
    payments = [PaymentPeriod("u1", "R", "A-1", 1, datetime(2024, 5, 15, 0, 0), end)]

    due = calculate_user_due("u1", "R", "A-1", payments, as_of=datetime(2024, 6, 15, 0, 1))
    assert due.overdue_days == 1
    assert due.last_paid_period_end == date(2024, 6, 14)


def test_custom_maintenance_category():
    payments = [period(end=AS_OF - timedelta(days=20), category_id=7)]
    assert calculate_user_due("u1", "R", "A-1", payments, as_of=AS_OF) is None

    due = calculate_user_due("u1", "R", "A-1", payments, as_of=AS_OF, maintenance_category_id=7)
    assert due.overdue_days == 20
    assert MAINTENANCE_CATEGORY_ID == 1


def test_tie_on_period_end_keeps_first_record():
    end = AS_OF - timedelta(days=15)
    first = period(start=end - timedelta(days=30), end=end)
    second = period(start=end - timedelta(days=90), end=end)

    due = calculate_user_due("u1", "R", "A-1", [first, second], as_of=AS_OF)
    assert due.last_paid_period_end == end
    assert due.overdue_days == 15


# Batch aggregation


def test_scenario_single_resident_45_days(make_period):
    result = calculate_all_maintenance_due([make_period(user_id="x", days_ago=45)])

    assert result.total_overdue_users == 1
    due = result.users_with_due[0]
    assert due.overdue_days == 45
    assert due.formatted_duration == "1 month, 15 days"


def test_scenario_two_records_picks_most_recent(make_period):
    result = calculate_all_maintenance_due(
        [make_period(user_id="y", days_ago=100), make_period(user_id="y", days_ago=10)]
    )

    assert result.total_overdue_users == 1
    assert result.users_with_due[0].overdue_days == 10


def test_scenario_non_maintenance_resident_absent(make_period):
    result = calculate_all_maintenance_due(
        [make_period(user_id="z", days_ago=60, category_id=2), make_period(user_id="x", days_ago=5)]
    )

    assert [d.user_id for d in result.users_with_due] == ["x"]


def test_scenario_missing_period_start_absent():
    payments = [PaymentPeriod("w", "W", "D-4", 1, None, AS_OF - timedelta(days=30))]
    result = calculate_all_maintenance_due(payments, as_of=AS_OF)

    assert result.users_with_due == []
    assert result.total_overdue_users == 0


def test_scenario_average_of_three(make_period):
    result = calculate_all_maintenance_due(
        [
            make_period(user_id="a", days_ago=10),
            make_period(user_id="b", days_ago=20),
            make_period(user_id="c", days_ago=30),
        ]
    )

    assert result.total_overdue_users == 3
    assert len(result.users_with_due) == 3
    assert result.average_overdue_days == 20


def test_scenario_empty_input():
    result = calculate_all_maintenance_due([])

    assert result.users_with_due == []
    assert result.total_overdue_users == 0
    assert result.average_overdue_days == 0


def test_average_rounds_half_up(make_period):
    """(10 + 11) / 2 = 10.5 -> 11"""
    result = calculate_all_maintenance_due(
        [make_period(user_id="a", days_ago=10), make_period(user_id="b", days_ago=11)]
    )
    assert result.average_overdue_days == 11


def test_paid_up_residents_do_not_count_towards_average(make_period):
    result = calculate_all_maintenance_due(
        [
            make_period(user_id="a", days_ago=40),
            make_period(user_id="b", days_ago=0),
            make_period(user_id="c", days_ago=-30),
        ]
    )

    assert result.total_overdue_users == 1
    assert result.average_overdue_days == 40


def test_first_seen_identity_is_kept():
    payments = [
        period(user_id="u1", end=AS_OF - timedelta(days=3), name="First Name", house="A-1"),
        period(user_id="u1", end=AS_OF - timedelta(days=9), name="Renamed", house="Z-9"),
    ]
    result = calculate_all_maintenance_due(payments, as_of=AS_OF)

    due = result.users_with_due[0]
    assert due.user_name == "First Name"
    assert due.house_number == "A-1"
    assert due.overdue_days == 3


def test_input_records_are_not_mutated(make_period):
    payments = [make_period(user_id="a", days_ago=10), make_period(user_id="a", days_ago=70)]
    snapshot = [(p.user_id, p.period_start, p.period_end) for p in payments]

    calculate_all_maintenance_due(payments)

    assert [(p.user_id, p.period_start, p.period_end) for p in payments] == snapshot
