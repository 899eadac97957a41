"""
Transaction database model.

A recurring series stores its template and its generated instances as rows of
this one table, told apart by ``is_recurring_template``. Two partial unique
indexes back the series invariants: one template per series, and at most one
instance per (series, date).
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Date, Numeric, Text, Enum, ForeignKey, Index, text
import enum
from fintrack.database import Base


class TransactionType(str, enum.Enum):
    """Transaction type enumeration."""
    deposit = "deposit"
    withdraw = "withdraw"
    transfer = "transfer"
    loan_payment = "loan_payment"
    interest_paid = "interest_paid"
    interest_earned = "interest_earned"
    credit_card_spending = "credit_card_spending"
    credit_card_payment = "credit_card_payment"


class TransactionStatus(str, enum.Enum):
    """Transaction status enumeration."""
    created = "Created"
    scheduled = "Scheduled"
    posted = "Posted"
    pending = "Pending"
    canceled = "Canceled"


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    transaction_type = Column(Enum(TransactionType), nullable=False)
    # Either side may point into any of the four account tables
    from_account_id = Column(String(36), nullable=True, index=True)
    to_account_id = Column(String(36), nullable=True, index=True)
    amount = Column(Numeric(12, 2), nullable=False)  # Always positive; direction comes from the account sides
    date = Column(Date, nullable=False, index=True)
    status = Column(Enum(TransactionStatus), nullable=False, default=TransactionStatus.created)
    description = Column(Text, nullable=True)
    recurring_series_id = Column(
        String(36),
        ForeignKey("recurring_transaction_series.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_recurring_template = Column(Boolean, default=False, nullable=False)
    generation_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("idx_transaction_series", "recurring_series_id"),
        Index(
            "uq_transaction_series_instance_date",
            "recurring_series_id",
            "date",
            unique=True,
            sqlite_where=text("is_recurring_template = 0"),
            postgresql_where=text("is_recurring_template = false"),
        ),
        Index(
            "uq_transaction_series_template",
            "recurring_series_id",
            unique=True,
            sqlite_where=text("is_recurring_template = 1"),
            postgresql_where=text("is_recurring_template = true"),
        ),
    )
