"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date, timedelta
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from society_ledger.api.main import create_app
from society_ledger.infrastructure.database.models import Base, PaymentCategory, ExpenseCategory, Resident
from society_ledger.infrastructure.database.session import get_db
from society_ledger.domain.models import PaymentPeriod


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TODAY = date.today()


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded_db(db: Session) -> Session:
    """Categories plus three residents; payment category 1 is maintenance"""
    db.add_all(
        [
            PaymentCategory(id=1, name="Maintenance"),
            PaymentCategory(id=2, name="Festival Fund"),
            ExpenseCategory(id=1, name="Electricity"),
            ExpenseCategory(id=2, name="Security"),
            Resident(id="u-asha", name="Asha Rao", house_number="A-101"),
            Resident(id="u-vikram", name="Vikram Shah", house_number="B-202"),
            Resident(id="u-meera", name="Meera Iyer", house_number="C-303"),
        ]
    )
    db.commit()
    return db


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def make_period():
    """Factory for maintenance payment periods ending `days_ago` days before today"""

    def _make(
        user_id: str = "u1",
        days_ago: int = 10,
        category_id: int = 1,
        user_name: str = "Resident",
        house_number: str = "A-1",
        length_days: int = 30,
    ) -> PaymentPeriod:
        period_end = TODAY - timedelta(days=days_ago)
        return PaymentPeriod(
            user_id=user_id,
            user_name=user_name,
            house_number=house_number,
            category_id=category_id,
            period_start=period_end - timedelta(days=length_days),
            period_end=period_end,
            payment_date=period_end - timedelta(days=length_days),
        )

    return _make
