"""Dashboard summary endpoint"""

import logging
from datetime import date
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from society_ledger.api.v1.schemas import (
    DashboardSummaryResponse,
    MonthlyTotalsItem,
    CategoryTotalItem,
    TransactionItem,
    MaintenanceStatusResponse,
)
from society_ledger.api.v1.dues import calculate_dues
from society_ledger.api.dependencies import get_request_id
from society_ledger.domain.dashboard import build_dashboard_summary, UNCATEGORIZED
from society_ledger.domain.due_report import summarize_maintenance_status
from society_ledger.infrastructure.database.session import get_db
from society_ledger.infrastructure.database.repositories import (
    PaymentRepository,
    ExpenseRepository,
    ResidentRepository,
)

router = APIRouter()


@router.get("/dashboard/summary", response_model=DashboardSummaryResponse)
def get_dashboard_summary(request: Request, db: Session = Depends(get_db)):
    """
    Society finances at a glance.

    Totals are all-time; the monthly trend covers the six calendar months
    ending with the current one.
    """
    request_id = get_request_id(request)

    summary = build_dashboard_summary(
        PaymentRepository(db).get_ledger_entries(),
        ExpenseRepository(db).get_ledger_entries(),
        as_of=date.today(),
    )
    active_residents = ResidentRepository(db).count_active()
    status = summarize_maintenance_status(active_residents, calculate_dues(db, request_id).total_overdue_users)

    logging.info(
        "Dashboard summary computed",
        extra={"request_id": request_id, "net_balance": str(summary.net_balance)},
    )

    return DashboardSummaryResponse(
        total_payments=summary.total_payments,
        total_expenses=summary.total_expenses,
        net_balance=summary.net_balance,
        monthly_net_balance=summary.monthly_net_balance,
        active_residents=active_residents,
        monthly=[
            MonthlyTotalsItem(month=m.month, payments=m.payments, expenses=m.expenses, net_balance=m.net_balance)
            for m in summary.monthly
        ],
        payments_by_category=[
            CategoryTotalItem(category=c.category, amount=c.amount) for c in summary.payments_by_category
        ],
        expenses_by_category=[
            CategoryTotalItem(category=c.category, amount=c.amount) for c in summary.expenses_by_category
        ],
        recent_transactions=[
            TransactionItem(
                id=t.id,
                kind=t.kind,
                amount=t.amount,
                entry_date=t.entry_date,
                category=t.category_name or UNCATEGORIZED,
                party=t.party,
                notes=t.notes,
            )
            for t in summary.recent_transactions
        ],
        maintenance_status=MaintenanceStatusResponse(paid=status.paid, overdue=status.overdue),
    )
