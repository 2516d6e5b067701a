"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ResidentNotFoundError(DomainException):
    """Referenced resident does not exist"""

    pass


class DuplicateResidentError(DomainException):
    """A resident with the same id is already registered"""

    pass


class CategoryNotFoundError(DomainException):
    """Referenced payment or expense category does not exist"""

    pass


class PaymentNotFoundError(DomainException):
    """Payment row does not exist"""

    pass


class ExpenseNotFoundError(DomainException):
    """Expense row does not exist"""

    pass


class InvalidPaymentPeriodError(DomainException):
    """Payment period has a single bound or ends before it starts"""

    pass


class ReminderDeliveryError(DomainException):
    """Reminder webhook could not be delivered after all retries"""

    pass
