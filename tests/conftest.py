"""Pytest fixtures for testing"""

import os

# Point the service at SQLite before any module builds the engine
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import datetime
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finance_gateway.api.main import create_app
from finance_gateway.infrastructure.database.models import (
    Base,
    FinancialProfileRecord,
    RecurringCostRecord,
    StockItemRecord,
    SubscriptionRecord,
    TransactionRecord,
)
from finance_gateway.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
def add_profile(db: Session):
    """Insert a committed financial profile"""

    def _add(owner_id: str = "user_1", benefits=None, fixed_income=0.0, variable_income_avg=0.0, has_stock=False):
        profile = FinancialProfileRecord(
            owner_id=owner_id,
            fixed_income=fixed_income,
            variable_income_avg=variable_income_avg,
            benefits=benefits or [],
            has_stock=has_stock,
        )
        db.add(profile)
        db.commit()
        return profile

    return _add


@pytest.fixture
def add_cost(db: Session):
    """Insert a committed recurring cost"""

    def _add(amount: float, frequency: str, created_at: datetime, owner_id: str = "user_1", is_fixed=True, is_active=True):
        cost = RecurringCostRecord(
            owner_id=owner_id,
            name=f"{frequency.lower()} cost",
            amount=amount,
            frequency=frequency,
            is_fixed=is_fixed,
            is_active=is_active,
            created_at=created_at,
        )
        db.add(cost)
        db.commit()
        return cost

    return _add


@pytest.fixture
def add_transaction(db: Session):
    """Insert a committed transaction"""

    def _add(name: str, amount: float, type: str, category: str, date, owner_id: str = "user_1", group_id=None):
        row = TransactionRecord(
            owner_id=owner_id,
            name=name,
            amount=amount,
            type=type,
            category=category,
            payment_method="CARD",
            date=date,
            installment_group_id=group_id,
        )
        db.add(row)
        db.commit()
        return row

    return _add


@pytest.fixture
def add_subscription(db: Session):
    def _add(name: str, amount: float, owner_id: str = "user_1", active=True, next_due_date=None):
        row = SubscriptionRecord(owner_id=owner_id, name=name, amount=amount, active=active, next_due_date=next_due_date)
        db.add(row)
        db.commit()
        return row

    return _add


@pytest.fixture
def add_stock_item(db: Session):
    def _add(quantity: float, cost_price: float, created_at: datetime, owner_id: str = "user_1", sale_price=0.0):
        row = StockItemRecord(
            owner_id=owner_id,
            name="Item",
            quantity=quantity,
            cost_price=cost_price,
            sale_price=sale_price,
            created_at=created_at,
        )
        db.add(row)
        db.commit()
        return row

    return _add
