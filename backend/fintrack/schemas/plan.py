"""
Plan Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List

from fintrack.schemas.account import (
    AccountResponse,
    CreditAccountResponse,
    LoanResponse,
    InvestmentAccountResponse,
)


class PlanCreate(BaseModel):
    """Schema for creating a plan."""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    start_date: date
    end_date: date
    target_amount: Optional[Decimal] = None


class PlanUpdate(BaseModel):
    """Schema for updating a plan. Only the fields sent are changed."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    target_amount: Optional[Decimal] = None


class PlanResponse(BaseModel):
    """Plan with its linked accounts."""
    id: str
    name: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    target_amount: Optional[Decimal] = None
    accounts: List[AccountResponse] = []
    credit_accounts: List[CreditAccountResponse] = []
    loans: List[LoanResponse] = []
    investment_accounts: List[InvestmentAccountResponse] = []
    created_at: datetime

    class Config:
        from_attributes = True
