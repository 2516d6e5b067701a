"""Unit tests for due presentation policy"""

import pytest
from datetime import date
from society_ledger.domain.models import MaintenanceDue
from society_ledger.domain.due_report import (
    classify_severity,
    filter_by_name,
    sort_dues,
    summarize_maintenance_status,
)


def due(user_id, name, house, days, last_end=None):
    return MaintenanceDue(
        user_id=user_id,
        user_name=name,
        house_number=house,
        last_paid_period_end=last_end,
        overdue_days=days,
        overdue_months=days // 30,
        formatted_duration=f"{days} days",
    )


@pytest.fixture
def dues():
    return [
        due("1", "asha Rao", "A-101", 12, date(2024, 5, 1)),
        due("2", "Vikram Shah", "B-202", 120, date(2024, 1, 1)),
        due("3", "Meera Iyer", "C-303", 45, None),
    ]


def test_classify_severity_thresholds_are_exclusive():
    assert classify_severity(91) == "critical"
    assert classify_severity(90) == "warning"
    assert classify_severity(31) == "warning"
    assert classify_severity(30) == "notice"
    assert classify_severity(1) == "notice"


def test_classify_severity_custom_thresholds():
    assert classify_severity(20, critical_days=14, warning_days=7) == "critical"
    assert classify_severity(10, critical_days=14, warning_days=7) == "warning"


def test_default_sort_is_most_overdue_first(dues):
    assert [d.overdue_days for d in sort_dues(dues)] == [120, 45, 12]


def test_sort_by_name_is_case_insensitive(dues):
    ordered = sort_dues(dues, sort_by="user_name", descending=False)
    assert [d.user_id for d in ordered] == ["1", "3", "2"]


def test_sort_by_last_paid_puts_missing_dates_first_ascending(dues):
    ordered = sort_dues(dues, sort_by="last_paid_period_end", descending=False)
    assert [d.user_id for d in ordered] == ["3", "2", "1"]


def test_sort_rejects_unknown_key(dues):
    with pytest.raises(ValueError):
        sort_dues(dues, sort_by="amount")


def test_filter_by_name(dues):
    assert [d.user_id for d in filter_by_name(dues, "SHAH")] == ["2"]
    assert [d.user_id for d in filter_by_name(dues, " rao ")] == ["1"]
    assert filter_by_name(dues, "nobody") == []


def test_blank_filter_keeps_everything(dues):
    assert filter_by_name(dues, None) == dues
    assert filter_by_name(dues, "   ") == dues


def test_summarize_maintenance_status():
    status = summarize_maintenance_status(active_residents=10, total_overdue_users=3)
    assert status.paid == 7
    assert status.overdue == 3

    # Overdue residents who are no longer active never push paid below zero
    status = summarize_maintenance_status(active_residents=2, total_overdue_users=5)
    assert status.paid == 0
    assert status.overdue == 5
