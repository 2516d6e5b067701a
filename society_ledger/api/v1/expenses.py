"""Society expense recording and CSV export"""

import io
import uuid
import logging
from datetime import date
from typing import List, Optional
import pandas as pd
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from society_ledger.api.v1.schemas import ExpenseCreate, ExpenseResponse
from society_ledger.api.dependencies import get_request_id
from society_ledger.domain.exceptions import CategoryNotFoundError, ExpenseNotFoundError
from society_ledger.infrastructure.database.session import get_db
from society_ledger.infrastructure.database.repositories import ExpenseRepository
from society_ledger.utils.date_utils import month_bounds

router = APIRouter()

EXPORT_COLUMNS = ["ID", "Amount", "Expense Date", "Category", "Notes", "Created At"]


def _to_expense_response(expense) -> ExpenseResponse:
    return ExpenseResponse(
        id=str(expense.id),
        category_id=expense.category_id,
        category_name=expense.category.name if expense.category else None,
        amount=expense.amount,
        expense_date=expense.expense_date,
        notes=expense.notes,
    )


@router.post("/expenses", response_model=ExpenseResponse, status_code=201)
def create_expense(body: ExpenseCreate, request: Request, db: Session = Depends(get_db)):
    request_id = get_request_id(request)

    try:
        expense = ExpenseRepository(db).create_expense(
            category_id=body.category_id,
            amount=body.amount,
            expense_date=body.expense_date,
            notes=body.notes,
        )
        db.commit()
        db.refresh(expense)

    except CategoryNotFoundError as e:
        db.rollback()
        logging.warning(f"Rejected expense: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info("Expense recorded", extra={"request_id": request_id, "expense_id": str(expense.id)})
    return _to_expense_response(expense)


@router.get("/expenses", response_model=List[ExpenseResponse])
def list_expenses(
    month: Optional[str] = Query(None, description="Expense month, YYYY-MM"),
    db: Session = Depends(get_db),
):
    date_from = date_to = None
    if month:
        try:
            date_from, date_to = month_bounds(month)
        except ValueError:
            raise HTTPException(status_code=422, detail="month must be formatted as YYYY-MM")

    expenses = ExpenseRepository(db).list_expenses(date_from=date_from, date_to=date_to)
    return [_to_expense_response(e) for e in expenses]


@router.get("/expenses/export")
def export_expenses(db: Session = Depends(get_db)):
    """Download all expenses as CSV, newest first"""
    expenses = ExpenseRepository(db).list_expenses()

    rows = [
        {
            "ID": str(e.id),
            "Amount": str(e.amount),
            "Expense Date": e.expense_date.isoformat() if e.expense_date else "",
            "Category": e.category.name if e.category else "Uncategorized",
            "Notes": e.notes or "",
            "Created At": e.created_at.isoformat() if e.created_at else "",
        }
        for e in expenses
    ]
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)

    output = io.StringIO()
    df.to_csv(output, index=False)

    filename = f"society-expenses-{date.today().isoformat()}.csv"
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.delete("/expenses/{expense_id}", status_code=204)
def delete_expense(expense_id: str, request: Request, db: Session = Depends(get_db)):
    request_id = get_request_id(request)

    try:
        expense_uuid = uuid.UUID(expense_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid expense ID format")

    try:
        ExpenseRepository(db).delete_expense(expense_uuid)
        db.commit()

    except ExpenseNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Expense not found")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info("Expense deleted", extra={"request_id": request_id, "expense_id": expense_id})
