"""
Recurring transaction series database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Date, Text, Enum
import enum
from fintrack.database import Base


class RecurrenceType(str, enum.Enum):
    """Recurrence unit enumeration."""
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"


class RecurringSeries(Base):
    """A recurrence rule; its template and instances reference it by recurring_series_id."""

    __tablename__ = "recurring_transaction_series"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    recurrence_type = Column(Enum(RecurrenceType), nullable=False)
    recurrence_interval = Column(Integer, nullable=False, default=1)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)  # None = open-ended
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
