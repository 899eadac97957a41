"""
Plan database model and account link tables.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Date, DateTime, Numeric, Text, Table, ForeignKey
from sqlalchemy.orm import relationship
from fintrack.database import Base


plan_accounts = Table(
    "plan_accounts",
    Base.metadata,
    Column("plan_id", String(36), ForeignKey("plans.id", ondelete="CASCADE"), primary_key=True),
    Column("account_id", String(36), ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True),
)

plan_credit_accounts = Table(
    "plan_credit_accounts",
    Base.metadata,
    Column("plan_id", String(36), ForeignKey("plans.id", ondelete="CASCADE"), primary_key=True),
    Column("credit_account_id", String(36), ForeignKey("credit_accounts.id", ondelete="CASCADE"), primary_key=True),
)

plan_loans = Table(
    "plan_loans",
    Base.metadata,
    Column("plan_id", String(36), ForeignKey("plans.id", ondelete="CASCADE"), primary_key=True),
    Column("loan_id", String(36), ForeignKey("loans.id", ondelete="CASCADE"), primary_key=True),
)

plan_investment_accounts = Table(
    "plan_investment_accounts",
    Base.metadata,
    Column("plan_id", String(36), ForeignKey("plans.id", ondelete="CASCADE"), primary_key=True),
    Column("investment_account_id", String(36), ForeignKey("investment_accounts.id", ondelete="CASCADE"), primary_key=True),
)


class Plan(Base):
    """Financial plan: a goal with a date range over a set of linked accounts."""

    __tablename__ = "plans"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    target_amount = Column(Numeric(12, 2), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    accounts = relationship("Account", secondary=plan_accounts, order_by="Account.name")
    credit_accounts = relationship("CreditAccount", secondary=plan_credit_accounts, order_by="CreditAccount.name")
    loans = relationship("Loan", secondary=plan_loans, order_by="Loan.name")
    investment_accounts = relationship(
        "InvestmentAccount", secondary=plan_investment_accounts, order_by="InvestmentAccount.name"
    )
