"""Residents and payment/expense categories"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from society_ledger.api.v1.schemas import (
    ResidentCreate,
    ResidentUpdate,
    ResidentDeactivate,
    ResidentResponse,
    CategoryCreate,
    CategoryResponse,
)
from society_ledger.api.dependencies import get_request_id
from society_ledger.domain.exceptions import DuplicateResidentError, ResidentNotFoundError
from society_ledger.infrastructure.database.session import get_db
from society_ledger.infrastructure.database.repositories import ResidentRepository, CategoryRepository

router = APIRouter()


def _to_resident_response(resident) -> ResidentResponse:
    return ResidentResponse(
        id=resident.id,
        name=resident.name,
        house_number=resident.house_number,
        email=resident.email,
        phone=resident.phone,
        is_active=resident.is_active,
        deactivation_reason=resident.deactivation_reason,
    )


@router.post("/residents", response_model=ResidentResponse, status_code=201)
def create_resident(body: ResidentCreate, request: Request, db: Session = Depends(get_db)):
    """Register a society member"""
    request_id = get_request_id(request)

    try:
        resident = ResidentRepository(db).create_resident(
            resident_id=body.id,
            name=body.name,
            house_number=body.house_number,
            email=body.email,
            phone=body.phone,
        )
        db.commit()

    except DuplicateResidentError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info("Resident registered", extra={"request_id": request_id, "resident_id": resident.id})
    return _to_resident_response(resident)


@router.get("/residents", response_model=List[ResidentResponse])
def list_residents(
    include_inactive: bool = Query(False, description="Include residents who moved out"),
    db: Session = Depends(get_db),
):
    residents = ResidentRepository(db).list_residents(include_inactive=include_inactive)
    return [_to_resident_response(r) for r in residents]


@router.patch("/residents/{resident_id}", response_model=ResidentResponse)
def update_resident(resident_id: str, body: ResidentUpdate, request: Request, db: Session = Depends(get_db)):
    """Edit a member's name, house number or contact details"""
    request_id = get_request_id(request)

    try:
        resident = ResidentRepository(db).update_resident(resident_id, body.model_dump(exclude_unset=True))
        db.commit()

    except ResidentNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Resident not found")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info("Resident updated", extra={"request_id": request_id, "resident_id": resident_id})
    return _to_resident_response(resident)


def _set_active(db: Session, request_id: str, resident_id: str, active: bool, reason: Optional[str] = None):
    try:
        resident = ResidentRepository(db).set_active(resident_id, active, reason)
        db.commit()

    except ResidentNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Resident not found")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info(
        "Resident activated" if active else "Resident deactivated",
        extra={"request_id": request_id, "resident_id": resident_id},
    )
    return _to_resident_response(resident)


@router.post("/residents/{resident_id}/deactivate", response_model=ResidentResponse)
def deactivate_resident(
    resident_id: str,
    request: Request,
    body: Optional[ResidentDeactivate] = None,
    db: Session = Depends(get_db),
):
    """Mark a member inactive; their payment history is kept"""
    reason = body.reason if body else None
    return _set_active(db, get_request_id(request), resident_id, active=False, reason=reason)


@router.post("/residents/{resident_id}/activate", response_model=ResidentResponse)
def activate_resident(resident_id: str, request: Request, db: Session = Depends(get_db)):
    return _set_active(db, get_request_id(request), resident_id, active=True)


def _create_category(db: Session, request_id: str, create, body: CategoryCreate) -> CategoryResponse:
    try:
        category = create(body.name, body.description)
        db.commit()

    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Category already exists")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return CategoryResponse(id=category.id, name=category.name, description=category.description)


@router.post("/payment-categories", response_model=CategoryResponse, status_code=201)
def create_payment_category(body: CategoryCreate, request: Request, db: Session = Depends(get_db)):
    return _create_category(db, get_request_id(request), CategoryRepository(db).create_payment_category, body)


@router.get("/payment-categories", response_model=List[CategoryResponse])
def list_payment_categories(db: Session = Depends(get_db)):
    return [
        CategoryResponse(id=c.id, name=c.name, description=c.description)
        for c in CategoryRepository(db).list_payment_categories()
    ]


@router.post("/expense-categories", response_model=CategoryResponse, status_code=201)
def create_expense_category(body: CategoryCreate, request: Request, db: Session = Depends(get_db)):
    return _create_category(db, get_request_id(request), CategoryRepository(db).create_expense_category, body)


@router.get("/expense-categories", response_model=List[CategoryResponse])
def list_expense_categories(db: Session = Depends(get_db)):
    return [
        CategoryResponse(id=c.id, name=c.name, description=c.description)
        for c in CategoryRepository(db).list_expense_categories()
    ]
