"""Maintenance due endpoints: overdue residents, paid/overdue status, reminders"""

import time
import logging
from datetime import date
from typing import Any, Dict, List, Literal, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from society_ledger.api.v1.schemas import (
    MaintenanceDueItem,
    MaintenanceDueResponse,
    MaintenanceStatusResponse,
    ReminderResponse,
)
from society_ledger.api.dependencies import get_request_id, get_reminder_client
from society_ledger.config import settings
from society_ledger.domain.dues import calculate_all_maintenance_due
from society_ledger.domain.due_report import classify_severity, filter_by_name, sort_dues, summarize_maintenance_status
from society_ledger.domain.exceptions import ReminderDeliveryError
from society_ledger.domain.models import DueCalculationResult
from society_ledger.infrastructure.clients.notifier import ReminderClient, build_overdue_event
from society_ledger.infrastructure.database.session import get_db
from society_ledger.infrastructure.database.repositories import (
    PaymentRepository,
    ResidentRepository,
    NotificationRepository,
)
from society_ledger.infrastructure.observability.metrics import record_due_calculation
from society_ledger.infrastructure.observability.logging import log_due_calculation

router = APIRouter()


def calculate_dues(db: Session, request_id: str) -> DueCalculationResult:
    """Load maintenance payment periods and run the due calculation as of today"""
    start_time = time.time()

    periods = PaymentRepository(db).get_payment_periods(category_id=settings.maintenance_category_id)
    result = calculate_all_maintenance_due(
        periods,
        as_of=date.today(),
        maintenance_category_id=settings.maintenance_category_id,
    )

    duration_ms = (time.time() - start_time) * 1000
    record_due_calculation(result)
    log_due_calculation(request_id, result.total_overdue_users, result.average_overdue_days, duration_ms)

    return result


async def _deliver_reminders(client: ReminderClient, events: List[Dict[str, Any]]) -> None:
    """Send reminder events one by one; a failed delivery does not stop the rest"""
    for event in events:
        try:
            await client.send_overdue_reminder(event)
        except ReminderDeliveryError as e:
            logging.warning(f"Reminder not delivered: {e}", extra={"user_id": event["user_id"]})


@router.get("/maintenance-due", response_model=MaintenanceDueResponse)
def get_maintenance_due(
    request: Request,
    search: Optional[str] = Query(None, description="Filter by resident name"),
    sort_by: Literal["overdue_days", "user_name", "house_number", "last_paid_period_end"] = Query("overdue_days"),
    order: Literal["asc", "desc"] = Query("desc"),
    db: Session = Depends(get_db),
):
    """
    Residents whose maintenance coverage has lapsed.

    Totals describe every overdue resident; the search filter only narrows
    the returned rows.
    """
    result = calculate_dues(db, get_request_id(request))

    dues = filter_by_name(result.users_with_due, search)
    dues = sort_dues(dues, sort_by=sort_by, descending=(order == "desc"))

    items = [
        MaintenanceDueItem(
            user_id=d.user_id,
            user_name=d.user_name,
            house_number=d.house_number,
            last_paid_period_end=d.last_paid_period_end,
            overdue_days=d.overdue_days,
            overdue_months=d.overdue_months,
            formatted_duration=d.formatted_duration,
            severity=classify_severity(d.overdue_days, settings.due_critical_days, settings.due_warning_days),
        )
        for d in dues
    ]

    return MaintenanceDueResponse(
        users_with_due=items,
        total_overdue_users=result.total_overdue_users,
        average_overdue_days=result.average_overdue_days,
    )


@router.get("/maintenance-due/status", response_model=MaintenanceStatusResponse)
def get_maintenance_status(request: Request, db: Session = Depends(get_db)):
    """Paid vs overdue split of active residents"""
    result = calculate_dues(db, get_request_id(request))
    active_residents = ResidentRepository(db).count_active()

    status = summarize_maintenance_status(active_residents, result.total_overdue_users)
    return MaintenanceStatusResponse(paid=status.paid, overdue=status.overdue)


@router.post("/maintenance-due/reminders", response_model=ReminderResponse)
def send_maintenance_reminders(
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    reminder_client: ReminderClient = Depends(get_reminder_client),
):
    """
    Notify every overdue resident.

    Flow:
    1. Calculate dues as of today
    2. Store one action-required notification per overdue resident
    3. Schedule webhook delivery after the response is sent
    """
    request_id = get_request_id(request)
    result = calculate_dues(db, request_id)

    try:
        notification_repo = NotificationRepository(db)
        for due in result.users_with_due:
            notification_repo.create_overdue_reminder(due)
        db.commit()

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    if result.users_with_due:
        events = [build_overdue_event(due) for due in result.users_with_due]
        background_tasks.add_task(_deliver_reminders, reminder_client, events)

    logging.info(
        "Maintenance reminders queued",
        extra={"request_id": request_id, "reminders_created": result.total_overdue_users},
    )

    return ReminderResponse(reminders_created=result.total_overdue_users)
