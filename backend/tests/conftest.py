"""Shared test fixtures."""

import os

# The app creates its tables on startup; keep that away from the on-disk database
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from datetime import date
from decimal import Decimal
import uuid

from fintrack.database import Base
from fintrack.dependencies import get_db
from fintrack.main import app
from fintrack.models.account import Account, AccountType, CreditAccount, Loan, InvestmentAccount, InvestmentType
from fintrack.models.plan import Plan
from fintrack.services.recurring_repository import RecurringRepository
from fintrack.services import recurring_service


# Fixed "now" for tests that depend on Posted/Scheduled status or projections
TODAY = date(2024, 3, 15)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test using in-memory SQLite."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Create session
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def repo(db_session):
    """Recurring persistence port over the test session."""
    return RecurringRepository(db_session)


@pytest.fixture
def checking_account(db_session):
    """Create a checking account with no interest."""
    account = Account(
        id=str(uuid.uuid4()),
        name="Checking",
        account_type=AccountType.checking,
        balance=Decimal("1000.00"),
    )
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture
def savings_account(db_session):
    """Create a savings account paying 12% APR."""
    account = Account(
        id=str(uuid.uuid4()),
        name="Savings",
        account_type=AccountType.savings,
        balance=Decimal("1000.00"),
        apr=Decimal("12.0"),
    )
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture
def credit_account(db_session):
    """Create a credit card with a balance owed."""
    account = CreditAccount(
        id=str(uuid.uuid4()),
        name="Visa",
        balance=Decimal("500.00"),
        credit_limit=Decimal("5000.00"),
    )
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture
def loan(db_session):
    """Create a car loan."""
    account = Loan(
        id=str(uuid.uuid4()),
        name="Car Loan",
        balance=Decimal("10000.00"),
        term_months=60,
    )
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture
def investment_account(db_session):
    """Create a brokerage account."""
    account = InvestmentAccount(
        id=str(uuid.uuid4()),
        name="Brokerage",
        account_type=InvestmentType.brokerage,
        balance=Decimal("2000.00"),
    )
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture
def sample_plan(db_session, checking_account):
    """Create a first-quarter plan over the checking account."""
    plan = Plan(
        id=str(uuid.uuid4()),
        name="Q1 2024",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 3, 31),
    )
    plan.accounts.append(checking_account)
    db_session.add(plan)
    db_session.commit()
    db_session.refresh(plan)
    return plan


@pytest.fixture
def monthly_series(repo, checking_account):
    """Create an open-ended monthly $100 deposit starting 2024-01-01."""
    return recurring_service.create_recurring_series(
        repo,
        {"name": "Allowance", "recurrence_type": "monthly", "start_date": date(2024, 1, 1)},
        {"transaction_type": "deposit", "to_account_id": checking_account.id, "amount": "100.00"},
        today=TODAY,
    )
