"""
Ledger Pydantic schemas.

Money values are floats here; the projector works in Decimal and the plans
router converts at the boundary.
"""

from pydantic import BaseModel
from datetime import date
from typing import Dict, List, Optional


class LedgerEntryResponse(BaseModel):
    id: str
    description: str
    amount: float
    type: str


class AccountSnapshotResponse(BaseModel):
    name: str
    balance: float
    transactions: Optional[float] = None
    transactions_detail: Optional[List[LedgerEntryResponse]] = None
    interest_applied: Optional[float] = None


class LedgerTotalsResponse(BaseModel):
    standard_balance: float
    credit_balance: float
    loan_balance: float
    investment_balance: float
    total: float
    projected_total: float


class LedgerRowResponse(BaseModel):
    date: date
    day_of_week: str
    standard_accounts: Dict[str, AccountSnapshotResponse] = {}
    credit_accounts: Dict[str, AccountSnapshotResponse] = {}
    loan_accounts: Dict[str, AccountSnapshotResponse] = {}
    investment_accounts: Dict[str, AccountSnapshotResponse] = {}
    totals: LedgerTotalsResponse


class LedgerSummaryResponse(BaseModel):
    current_net_worth: float
    projected_final_value: float
    growth_rate_pct: Optional[float] = None


class LedgerResponse(BaseModel):
    """One page of ledger rows plus whole-plan summary figures."""
    plan_id: str
    start_date: date
    end_date: date
    rows: List[LedgerRowResponse]
    total_rows: int
    page: int
    per_page: int
    pages: int
    summary: LedgerSummaryResponse
