"""
Transaction schemas.
"""

from pydantic import BaseModel
from typing import Any, Literal, Optional
from datetime import date, datetime
from decimal import Decimal

from fintrack.models.transaction import TransactionType, TransactionStatus


class TransactionResponse(BaseModel):
    id: str
    transaction_type: TransactionType
    from_account_id: Optional[str]
    to_account_id: Optional[str]
    amount: Decimal
    date: date
    status: TransactionStatus
    description: Optional[str]
    recurring_series_id: Optional[str]
    is_recurring_template: bool
    generation_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TransactionTemplateResponse(TransactionResponse):
    """The single source-of-truth row of a recurring series."""
    is_recurring_template: Literal[True]


class TransactionInstanceResponse(TransactionResponse):
    """A transaction generated from a series template."""
    is_recurring_template: Literal[False]


class TransactionCreate(BaseModel):
    """A one-off transaction entered by hand. Values are checked by transaction_service."""
    transaction_type: Optional[str] = None
    from_account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    amount: Any = None
    date: Any = None
    status: Optional[str] = None
    description: Optional[str] = None


class TransactionStatusUpdate(BaseModel):
    status: Optional[str] = None


class TransactionListResponse(BaseModel):
    items: list[TransactionResponse]
    total: int
