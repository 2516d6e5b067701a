"""Pydantic schemas for API request/response validation"""

from decimal import Decimal
from datetime import date
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator

IntervalType = Literal["monthly", "quarterly", "half_yearly", "annually"]
PaymentType = Literal["cash", "cheque", "upi"]


class ResidentCreate(BaseModel):
    """Request body for POST /v1/residents"""

    id: str = Field(..., min_length=1, description="Resident identifier from the auth provider")
    name: str = Field(..., min_length=1)
    house_number: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = Field(None, pattern=r"^\d{10}$", description="10-digit phone number")


class ResidentUpdate(BaseModel):
    """Request body for PATCH /v1/residents/{id}; omitted fields are left unchanged"""

    name: Optional[str] = Field(None, min_length=1)
    house_number: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = Field(None, pattern=r"^\d{10}$")

    @field_validator("name", "house_number")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v


class ResidentDeactivate(BaseModel):
    reason: Optional[str] = Field(None, description="Why the member was deactivated")


class ResidentResponse(BaseModel):
    id: str
    name: str
    house_number: str
    email: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool
    deactivation_reason: Optional[str] = None


class CategoryCreate(BaseModel):
    """Request body for creating a payment or expense category"""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None


class PaymentCreate(BaseModel):
    """Request body for POST /v1/payments"""

    resident_id: str = Field(..., min_length=1, description="Paying resident")
    category_id: int = Field(..., ge=1)
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    payment_date: date
    payment_type: PaymentType = "cash"
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    interval_type: Optional[IntervalType] = None
    notes: Optional[str] = None


class PaymentUpdate(BaseModel):
    """Request body for PATCH /v1/payments/{id}; omitted fields are left unchanged"""

    resident_id: Optional[str] = Field(None, min_length=1)
    category_id: Optional[int] = Field(None, ge=1)
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    payment_date: Optional[date] = None
    payment_type: Optional[PaymentType] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    interval_type: Optional[IntervalType] = None
    notes: Optional[str] = None

    @field_validator("resident_id", "category_id", "amount", "payment_date", "payment_type")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v


class PaymentResponse(BaseModel):
    id: str
    resident_id: str
    user_name: Optional[str] = None
    house_number: Optional[str] = None
    category_id: int
    category_name: Optional[str] = None
    amount: Decimal
    payment_date: Optional[date] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    interval_type: Optional[str] = None
    payment_type: str
    notes: Optional[str] = None


class ExpenseCreate(BaseModel):
    """Request body for POST /v1/expenses"""

    category_id: int = Field(..., ge=1)
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    expense_date: date
    notes: Optional[str] = None


class ExpenseResponse(BaseModel):
    id: str
    category_id: int
    category_name: Optional[str] = None
    amount: Decimal
    expense_date: Optional[date] = None
    notes: Optional[str] = None


class MaintenanceDueItem(BaseModel):
    """Single overdue resident"""

    user_id: str
    user_name: str
    house_number: str
    last_paid_period_end: Optional[date] = None
    overdue_days: int
    overdue_months: int
    formatted_duration: str
    severity: Literal["critical", "warning", "notice"]


class MaintenanceDueResponse(BaseModel):
    """Response for GET /v1/maintenance-due"""

    users_with_due: List[MaintenanceDueItem]
    total_overdue_users: int
    average_overdue_days: int


class MaintenanceStatusResponse(BaseModel):
    """Response for GET /v1/maintenance-due/status"""

    paid: int
    overdue: int


class ReminderResponse(BaseModel):
    """Response for POST /v1/maintenance-due/reminders"""

    reminders_created: int


class CategoryTotalItem(BaseModel):
    category: str
    amount: Decimal


class MonthlyTotalsItem(BaseModel):
    month: str
    payments: Decimal
    expenses: Decimal
    net_balance: Decimal


class TransactionItem(BaseModel):
    id: str
    kind: Literal["payment", "expense"]
    amount: Decimal
    entry_date: Optional[date] = None
    category: str
    party: str
    notes: Optional[str] = None


class DashboardSummaryResponse(BaseModel):
    """Response for GET /v1/dashboard/summary"""

    total_payments: Decimal
    total_expenses: Decimal
    net_balance: Decimal
    monthly_net_balance: Decimal
    active_residents: int
    monthly: List[MonthlyTotalsItem]
    payments_by_category: List[CategoryTotalItem]
    expenses_by_category: List[CategoryTotalItem]
    recent_transactions: List[TransactionItem]
    maintenance_status: MaintenanceStatusResponse
