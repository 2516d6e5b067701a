"""Data access layer for society entities"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List
from sqlalchemy.orm import Session, joinedload
from society_ledger.infrastructure.database.models import (
    Resident,
    PaymentCategory,
    ExpenseCategory,
    Payment,
    Expense,
    Notification,
)
from society_ledger.domain.models import PaymentPeriod, MaintenanceDue, LedgerEntry
from society_ledger.domain.exceptions import (
    ResidentNotFoundError,
    DuplicateResidentError,
    CategoryNotFoundError,
    PaymentNotFoundError,
    ExpenseNotFoundError,
    InvalidPaymentPeriodError,
)
from society_ledger.utils.date_utils import parse_optional_date


class ResidentRepository:
    """Repository for society residents"""

    def __init__(self, db: Session):
        self.db = db

    def create_resident(
        self,
        resident_id: str,
        name: str,
        house_number: str,
        email: str | None = None,
        phone: str | None = None,
    ) -> Resident:
        """Register a resident; ids are assigned by the auth provider upstream"""
        if self.db.get(Resident, resident_id) is not None:
            raise DuplicateResidentError(f"Resident {resident_id} already exists")

        resident = Resident(
            id=resident_id,
            name=name,
            house_number=house_number,
            email=email,
            phone=phone,
            is_active=True,
        )
        self.db.add(resident)
        self.db.flush()
        return resident

    def get_resident(self, resident_id: str) -> Resident:
        resident = self.db.get(Resident, resident_id)
        if resident is None:
            raise ResidentNotFoundError(f"Resident {resident_id} not found")
        return resident

    def update_resident(self, resident_id: str, changes: Dict[str, Any]) -> Resident:
        """Apply profile edits (name, house number, email, phone)"""
        resident = self.get_resident(resident_id)
        for attr, value in changes.items():
            setattr(resident, attr, value)
        self.db.flush()
        return resident

    def set_active(self, resident_id: str, active: bool, reason: str | None = None) -> Resident:
        """
        Activate or deactivate a member.

        Deactivation keeps payment history; the reason is cleared on reactivation.
        """
        resident = self.get_resident(resident_id)
        resident.is_active = active
        resident.deactivation_reason = None if active else reason
        self.db.flush()
        return resident

    def list_residents(self, include_inactive: bool = False) -> List[Resident]:
        query = self.db.query(Resident)
        if not include_inactive:
            query = query.filter(Resident.is_active.is_(True))
        return query.order_by(Resident.house_number, Resident.name).all()

    def count_active(self) -> int:
        return self.db.query(Resident).filter(Resident.is_active.is_(True)).count()


class CategoryRepository:
    """Repository for payment and expense categories"""

    def __init__(self, db: Session):
        self.db = db

    def create_payment_category(self, name: str, description: str | None = None) -> PaymentCategory:
        category = PaymentCategory(name=name, description=description)
        self.db.add(category)
        self.db.flush()
        return category

    def create_expense_category(self, name: str, description: str | None = None) -> ExpenseCategory:
        category = ExpenseCategory(name=name, description=description)
        self.db.add(category)
        self.db.flush()
        return category

    def list_payment_categories(self) -> List[PaymentCategory]:
        return self.db.query(PaymentCategory).order_by(PaymentCategory.id).all()

    def list_expense_categories(self) -> List[ExpenseCategory]:
        return self.db.query(ExpenseCategory).order_by(ExpenseCategory.id).all()


class PaymentRepository:
    """Repository for resident payments"""

    def __init__(self, db: Session):
        self.db = db

    def create_payment(
        self,
        resident_id: str,
        category_id: int,
        amount: Decimal,
        payment_date: date,
        payment_type: str = "cash",
        period_start: date | None = None,
        period_end: date | None = None,
        interval_type: str | None = None,
        notes: str | None = None,
    ) -> Payment:
        """
        Record a payment.

        Raises:
            ResidentNotFoundError: Unknown resident id
            CategoryNotFoundError: Unknown payment category id
            InvalidPaymentPeriodError: Exactly one period bound given, or end before start
        """
        self._validate(resident_id, category_id, period_start, period_end)

        payment = Payment(
            resident_id=resident_id,
            category_id=category_id,
            amount=amount,
            payment_date=payment_date,
            payment_type=payment_type,
            period_start=period_start,
            period_end=period_end,
            interval_type=interval_type,
            notes=notes,
        )
        self.db.add(payment)
        self.db.flush()
        return payment

    def _validate(
        self,
        resident_id: str,
        category_id: int,
        period_start: date | None,
        period_end: date | None,
    ) -> None:
        if self.db.get(Resident, resident_id) is None:
            raise ResidentNotFoundError(f"Resident {resident_id} not found")
        if self.db.get(PaymentCategory, category_id) is None:
            raise CategoryNotFoundError(f"Payment category {category_id} not found")

        if (period_start is None) != (period_end is None):
            raise InvalidPaymentPeriodError("Both period start and period end are required")
        if period_start is not None and period_end < period_start:
            raise InvalidPaymentPeriodError("Period end must not be before period start")

    def update_payment(self, payment_id: uuid.UUID, changes: Dict[str, Any]) -> Payment:
        """
        Edit a recorded payment.

        The merged record goes through the same checks as a new payment, so
        moving only one period bound past the other is rejected.

        Raises:
            PaymentNotFoundError: Unknown payment id
            ResidentNotFoundError, CategoryNotFoundError, InvalidPaymentPeriodError
        """
        payment = self.db.get(Payment, payment_id)
        if payment is None:
            raise PaymentNotFoundError(f"Payment {payment_id} not found")

        merged = {
            "resident_id": payment.resident_id,
            "category_id": payment.category_id,
            "period_start": payment.period_start,
            "period_end": payment.period_end,
        }
        merged.update({k: v for k, v in changes.items() if k in merged})
        self._validate(**merged)

        for attr, value in changes.items():
            setattr(payment, attr, value)
        self.db.flush()
        return payment

    def delete_payment(self, payment_id: uuid.UUID) -> None:
        payment = self.db.get(Payment, payment_id)
        if payment is None:
            raise PaymentNotFoundError(f"Payment {payment_id} not found")
        self.db.delete(payment)
        self.db.flush()

    def list_payments(
        self,
        category_id: int | None = None,
        house_number: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> List[Payment]:
        """Payments with resident and category loaded, newest payment date first"""
        query = (
            self.db.query(Payment)
            .outerjoin(Resident, Payment.resident_id == Resident.id)
            .options(joinedload(Payment.resident), joinedload(Payment.category))
        )
        if category_id is not None:
            query = query.filter(Payment.category_id == category_id)
        if house_number:
            query = query.filter(Resident.house_number == house_number)
        if date_from is not None:
            query = query.filter(Payment.payment_date >= date_from)
        if date_to is not None:
            query = query.filter(Payment.payment_date <= date_to)

        return query.order_by(Payment.payment_date.desc(), Payment.created_at.desc()).all()

    def get_payment_periods(self, category_id: int | None = None) -> List[PaymentPeriod]:
        """
        Join payments with resident identity for due calculation.

        Rows without a resident name or house number are dropped; dates that do
        not parse become None so the calculator treats the period as invalid.
        """
        query = self.db.query(
            Payment.resident_id,
            Resident.name,
            Resident.house_number,
            Payment.category_id,
            Payment.period_start,
            Payment.period_end,
            Payment.payment_date,
        ).outerjoin(Resident, Payment.resident_id == Resident.id)

        if category_id is not None:
            query = query.filter(Payment.category_id == category_id)

        return [
            PaymentPeriod(
                user_id=row.resident_id,
                user_name=row.name,
                house_number=row.house_number,
                category_id=row.category_id,
                period_start=parse_optional_date(row.period_start),
                period_end=parse_optional_date(row.period_end),
                payment_date=parse_optional_date(row.payment_date),
            )
            for row in query.all()
            if row.resident_id and row.name and row.house_number
        ]

    def get_ledger_entries(self) -> List[LedgerEntry]:
        """Every payment with its category name and paying resident"""
        rows = (
            self.db.query(
                Payment.id,
                Payment.amount,
                Payment.payment_date,
                Payment.notes,
                PaymentCategory.name.label("category_name"),
                Resident.name.label("resident_name"),
            )
            .outerjoin(PaymentCategory, Payment.category_id == PaymentCategory.id)
            .outerjoin(Resident, Payment.resident_id == Resident.id)
            .all()
        )
        return [
            LedgerEntry(
                id=str(row.id),
                kind="payment",
                amount=row.amount,
                entry_date=parse_optional_date(row.payment_date),
                category_name=row.category_name,
                party=row.resident_name,
                notes=row.notes,
            )
            for row in rows
        ]


class ExpenseRepository:
    """Repository for society expenses"""

    def __init__(self, db: Session):
        self.db = db

    def create_expense(
        self,
        category_id: int,
        amount: Decimal,
        expense_date: date,
        notes: str | None = None,
    ) -> Expense:
        if self.db.get(ExpenseCategory, category_id) is None:
            raise CategoryNotFoundError(f"Expense category {category_id} not found")

        expense = Expense(
            category_id=category_id,
            amount=amount,
            expense_date=expense_date,
            notes=notes,
        )
        self.db.add(expense)
        self.db.flush()
        return expense

    def delete_expense(self, expense_id: uuid.UUID) -> None:
        expense = self.db.get(Expense, expense_id)
        if expense is None:
            raise ExpenseNotFoundError(f"Expense {expense_id} not found")
        self.db.delete(expense)
        self.db.flush()

    def list_expenses(self, date_from: date | None = None, date_to: date | None = None) -> List[Expense]:
        query = self.db.query(Expense).options(joinedload(Expense.category))
        if date_from is not None:
            query = query.filter(Expense.expense_date >= date_from)
        if date_to is not None:
            query = query.filter(Expense.expense_date <= date_to)
        return query.order_by(Expense.expense_date.desc(), Expense.created_at.desc()).all()

    def get_ledger_entries(self) -> List[LedgerEntry]:
        rows = (
            self.db.query(
                Expense.id,
                Expense.amount,
                Expense.expense_date,
                Expense.notes,
                ExpenseCategory.name.label("category_name"),
            )
            .outerjoin(ExpenseCategory, Expense.category_id == ExpenseCategory.id)
            .all()
        )
        return [
            LedgerEntry(
                id=str(row.id),
                kind="expense",
                amount=row.amount,
                entry_date=parse_optional_date(row.expense_date),
                category_name=row.category_name,
                notes=row.notes,
            )
            for row in rows
        ]


class NotificationRepository:
    """Repository for resident notifications"""

    def __init__(self, db: Session):
        self.db = db

    def create_overdue_reminder(self, due: MaintenanceDue) -> Notification:
        """Store an action-required reminder for an overdue resident"""
        notification = Notification(
            resident_id=due.user_id,
            type="action_required",
            title="Maintenance payment overdue",
            body=(
                f"Maintenance for house {due.house_number} is overdue by {due.formatted_duration}. "
                "Please clear the pending amount."
            ),
        )
        self.db.add(notification)
        self.db.flush()
        return notification
