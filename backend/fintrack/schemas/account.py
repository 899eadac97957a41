"""
Account Pydantic schemas for plan responses.
"""

from pydantic import BaseModel
from decimal import Decimal
from typing import Optional
from fintrack.models.account import AccountType, InvestmentType


class AccountResponse(BaseModel):
    """Standard account as linked to a plan."""
    id: str
    name: str
    account_type: AccountType
    balance: Decimal
    apr: Optional[Decimal] = None

    class Config:
        from_attributes = True


class CreditAccountResponse(BaseModel):
    id: str
    name: str
    balance: Decimal
    credit_limit: Optional[Decimal] = None
    interest_rate: Optional[Decimal] = None

    class Config:
        from_attributes = True


class LoanResponse(BaseModel):
    id: str
    name: str
    balance: Decimal
    interest_rate: Optional[Decimal] = None
    term_months: Optional[int] = None

    class Config:
        from_attributes = True


class InvestmentAccountResponse(BaseModel):
    id: str
    name: str
    account_type: InvestmentType
    balance: Decimal
    expected_return: Optional[Decimal] = None

    class Config:
        from_attributes = True
