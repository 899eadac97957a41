"""
Account database models.

The four account categories live in separate tables and are linked to plans
independently. Balances are signed: for standard and investment accounts a
positive balance is an asset, for credit and loan accounts it is the amount
owed.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Numeric, Enum
import enum
from fintrack.database import Base


class AccountType(str, enum.Enum):
    """Standard account type enumeration."""
    checking = "checking"
    savings = "savings"
    cash = "cash"
    other = "other"


class InvestmentType(str, enum.Enum):
    """Investment account type enumeration."""
    ira = "ira"
    retirement_401k = "401k"
    brokerage = "brokerage"
    stock = "stock"
    crypto = "crypto"
    other = "other"


class Account(Base):
    """Standard (checking/savings/cash) account model."""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    account_type = Column(Enum(AccountType), nullable=False, default=AccountType.checking)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    apr = Column(Numeric(6, 3), nullable=True)  # Annual rate, percent
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class CreditAccount(Base):
    """Credit card account model."""

    __tablename__ = "credit_accounts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    balance = Column(Numeric(12, 2), nullable=False, default=0)  # Amount owed
    credit_limit = Column(Numeric(12, 2), nullable=True)
    interest_rate = Column(Numeric(6, 3), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class Loan(Base):
    """Loan account model."""

    __tablename__ = "loans"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    balance = Column(Numeric(12, 2), nullable=False, default=0)  # Principal owed
    interest_rate = Column(Numeric(6, 3), nullable=True)
    term_months = Column(Integer, nullable=True)  # None = open-ended
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class InvestmentAccount(Base):
    """Investment account model."""

    __tablename__ = "investment_accounts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    account_type = Column(Enum(InvestmentType), nullable=False, default=InvestmentType.brokerage)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    expected_return = Column(Numeric(6, 3), nullable=True)  # Annual rate, percent
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
