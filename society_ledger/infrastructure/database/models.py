"""SQLAlchemy ORM models for residents, payments, expenses and notifications"""

import uuid
from datetime import date
from sqlalchemy import Column, String, Boolean, DateTime, Date, Integer, Numeric, ForeignKey, Text, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Resident(Base):
    """Society member living at a house number"""

    __tablename__ = "residents"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    house_number = Column(Text, nullable=False, index=True)
    email = Column(Text, nullable=True)
    phone = Column(String(20), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    deactivation_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    payments = relationship("Payment", back_populates="resident", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="resident", cascade="all, delete-orphan")


class PaymentCategory(Base):
    """Payment category; id 1 is maintenance by convention"""

    __tablename__ = "payment_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    description = Column(Text, nullable=True)


class ExpenseCategory(Base):
    """Expense category"""

    __tablename__ = "expense_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    description = Column(Text, nullable=True)


class Payment(Base):
    """Payment received from a resident, optionally covering a service period"""

    __tablename__ = "payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    resident_id = Column(Text, ForeignKey("residents.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("payment_categories.id"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_date = Column(Date, nullable=True, default=date.today)
    period_start = Column(Date, nullable=True)
    period_end = Column(Date, nullable=True)
    interval_type = Column(Text, nullable=True)  # monthly | quarterly | half_yearly | annually
    payment_type = Column(Text, nullable=False, default="cash")  # cash | cheque | upi
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    resident = relationship("Resident", back_populates="payments")
    category = relationship("PaymentCategory")


class Expense(Base):
    """Society expense"""

    __tablename__ = "expenses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    category_id = Column(Integer, ForeignKey("expense_categories.id"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    expense_date = Column(Date, nullable=True, default=date.today)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    category = relationship("ExpenseCategory")


class Notification(Base):
    """In-app notification addressed to a resident"""

    __tablename__ = "notifications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    resident_id = Column(Text, ForeignKey("residents.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(Text, nullable=False, default="info")
    title = Column(Text, nullable=True)
    body = Column(Text, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    resident = relationship("Resident", back_populates="notifications")
