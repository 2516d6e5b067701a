"""Payment recording, listing, deletion and CSV export"""

import io
import uuid
import logging
from datetime import date
from typing import List, Optional
import pandas as pd
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from society_ledger.api.v1.schemas import PaymentCreate, PaymentUpdate, PaymentResponse
from society_ledger.api.dependencies import get_request_id
from society_ledger.domain.exceptions import (
    ResidentNotFoundError,
    CategoryNotFoundError,
    InvalidPaymentPeriodError,
    PaymentNotFoundError,
)
from society_ledger.infrastructure.database.session import get_db
from society_ledger.infrastructure.database.repositories import PaymentRepository
from society_ledger.infrastructure.observability.metrics import payment_recorded_counter
from society_ledger.utils.date_utils import month_bounds

router = APIRouter()

EXPORT_COLUMNS = [
    "ID",
    "Amount (INR)",
    "Payment Date",
    "User Name",
    "House Number",
    "Category",
    "Payment Type",
    "Interval Type",
    "Period Start",
    "Period End",
    "Notes",
    "Created At",
]


def _to_payment_response(payment) -> PaymentResponse:
    return PaymentResponse(
        id=str(payment.id),
        resident_id=payment.resident_id,
        user_name=payment.resident.name if payment.resident else None,
        house_number=payment.resident.house_number if payment.resident else None,
        category_id=payment.category_id,
        category_name=payment.category.name if payment.category else None,
        amount=payment.amount,
        payment_date=payment.payment_date,
        period_start=payment.period_start,
        period_end=payment.period_end,
        interval_type=payment.interval_type,
        payment_type=payment.payment_type,
        notes=payment.notes,
    )


def _month_range(month: Optional[str]) -> tuple[date | None, date | None]:
    if not month:
        return None, None
    try:
        return month_bounds(month)
    except ValueError:
        raise HTTPException(status_code=422, detail="month must be formatted as YYYY-MM")


@router.post("/payments", response_model=PaymentResponse, status_code=201)
def create_payment(body: PaymentCreate, request: Request, db: Session = Depends(get_db)):
    """
    Record a resident payment.

    Maintenance payments should carry a period; the latest period end drives
    the resident's due status.
    """
    request_id = get_request_id(request)

    try:
        payment = PaymentRepository(db).create_payment(
            resident_id=body.resident_id,
            category_id=body.category_id,
            amount=body.amount,
            payment_date=body.payment_date,
            payment_type=body.payment_type,
            period_start=body.period_start,
            period_end=body.period_end,
            interval_type=body.interval_type,
            notes=body.notes,
        )
        db.commit()
        db.refresh(payment)

    except (ResidentNotFoundError, CategoryNotFoundError, InvalidPaymentPeriodError) as e:
        db.rollback()
        logging.warning(f"Rejected payment: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    payment_recorded_counter.labels(category_id=str(payment.category_id)).inc()
    logging.info("Payment recorded", extra={"request_id": request_id, "payment_id": str(payment.id)})

    return _to_payment_response(payment)


@router.get("/payments", response_model=List[PaymentResponse])
def list_payments(
    category_id: Optional[int] = Query(None, description="Filter by payment category"),
    house_number: Optional[str] = Query(None, description="Filter by house number"),
    month: Optional[str] = Query(None, description="Payment month, YYYY-MM"),
    db: Session = Depends(get_db),
):
    """List payments, newest first"""
    date_from, date_to = _month_range(month)
    payments = PaymentRepository(db).list_payments(
        category_id=category_id,
        house_number=house_number,
        date_from=date_from,
        date_to=date_to,
    )
    return [_to_payment_response(p) for p in payments]


@router.get("/payments/export")
def export_payments(db: Session = Depends(get_db)):
    """Download all payments as CSV"""
    payments = PaymentRepository(db).list_payments()

    rows = [
        {
            "ID": str(p.id),
            "Amount (INR)": str(p.amount),
            "Payment Date": p.payment_date.isoformat() if p.payment_date else "",
            "User Name": p.resident.name if p.resident else "Unknown",
            "House Number": p.resident.house_number if p.resident else "Unknown",
            "Category": p.category.name if p.category else "Uncategorized",
            "Payment Type": p.payment_type or "Unknown",
            "Interval Type": p.interval_type or "",
            "Period Start": p.period_start.isoformat() if p.period_start else "",
            "Period End": p.period_end.isoformat() if p.period_end else "",
            "Notes": p.notes or "",
            "Created At": p.created_at.isoformat() if p.created_at else "",
        }
        for p in payments
    ]
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)

    output = io.StringIO()
    df.to_csv(output, index=False)

    filename = f"maintenance-payments-{date.today().isoformat()}.csv"
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


def _parse_payment_id(payment_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(payment_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid payment ID format")


@router.patch("/payments/{payment_id}", response_model=PaymentResponse)
def update_payment(payment_id: str, body: PaymentUpdate, request: Request, db: Session = Depends(get_db)):
    """
    Correct a recorded payment.

    Only the fields present in the body change. Resident, category and
    period bounds are re-checked against the merged record.
    """
    request_id = get_request_id(request)
    payment_uuid = _parse_payment_id(payment_id)

    try:
        payment = PaymentRepository(db).update_payment(payment_uuid, body.model_dump(exclude_unset=True))
        db.commit()
        db.refresh(payment)

    except PaymentNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Payment not found")

    except (ResidentNotFoundError, CategoryNotFoundError, InvalidPaymentPeriodError) as e:
        db.rollback()
        logging.warning(f"Rejected payment update: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info("Payment updated", extra={"request_id": request_id, "payment_id": payment_id})
    return _to_payment_response(payment)


@router.delete("/payments/{payment_id}", status_code=204)
def delete_payment(payment_id: str, request: Request, db: Session = Depends(get_db)):
    request_id = get_request_id(request)
    payment_uuid = _parse_payment_id(payment_id)

    try:
        PaymentRepository(db).delete_payment(payment_uuid)
        db.commit()

    except PaymentNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Payment not found")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info("Payment deleted", extra={"request_id": request_id, "payment_id": payment_id})
