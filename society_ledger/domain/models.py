"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional


@dataclass
class PaymentPeriod:
    """One payment row joined with the paying resident's identity"""

    user_id: str
    user_name: str
    house_number: str
    category_id: int
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    payment_date: Optional[date] = None  # Informational only


@dataclass
class MaintenanceDue:
    """Arrears status of a single resident"""

    user_id: str
    user_name: str
    house_number: str
    last_paid_period_end: Optional[date]
    overdue_days: int
    overdue_months: int
    formatted_duration: str


@dataclass
class DueCalculationResult:
    """Overdue residents plus summary statistics"""

    users_with_due: List[MaintenanceDue] = field(default_factory=list)
    total_overdue_users: int = 0
    average_overdue_days: int = 0


@dataclass
class MaintenanceStatus:
    """Paid vs overdue resident counts for the dashboard"""

    paid: int
    overdue: int


@dataclass
class LedgerEntry:
    """A payment or expense reduced to what the dashboard needs"""

    id: str
    kind: str  # "payment" | "expense"
    amount: Decimal
    entry_date: Optional[date]
    category_name: Optional[str]
    party: Optional[str] = None  # Paying resident; None for expenses
    notes: Optional[str] = None


@dataclass
class MonthlyTotals:
    month: str  # YYYY-MM
    payments: Decimal
    expenses: Decimal
    net_balance: Decimal


@dataclass
class CategoryTotal:
    category: str
    amount: Decimal


@dataclass
class DashboardSummary:
    """Society finances at a glance"""

    total_payments: Decimal
    total_expenses: Decimal
    net_balance: Decimal
    monthly_net_balance: Decimal
    monthly: List[MonthlyTotals] = field(default_factory=list)
    payments_by_category: List[CategoryTotal] = field(default_factory=list)
    expenses_by_category: List[CategoryTotal] = field(default_factory=list)
    recent_transactions: List[LedgerEntry] = field(default_factory=list)
