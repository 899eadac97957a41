"""
Pydantic schemas package.
"""

from fintrack.schemas.account import (
    AccountResponse,
    CreditAccountResponse,
    LoanResponse,
    InvestmentAccountResponse,
)
from fintrack.schemas.transaction import (
    TransactionResponse,
    TransactionCreate,
    TransactionTemplateResponse,
    TransactionInstanceResponse,
    TransactionStatusUpdate,
    TransactionListResponse,
)
from fintrack.schemas.recurring import (
    RecurringSeriesCreate,
    RecurringSeriesUpdate,
    RecurringSeriesResponse,
    RecurringSeriesDetail,
    RecurringSeriesUpdateResponse,
    GenerateResponse,
    DeleteResponse,
)
from fintrack.schemas.plan import (
    PlanCreate,
    PlanUpdate,
    PlanResponse,
)
from fintrack.schemas.ledger import (
    LedgerEntryResponse,
    AccountSnapshotResponse,
    LedgerTotalsResponse,
    LedgerRowResponse,
    LedgerSummaryResponse,
    LedgerResponse,
)

__all__ = [
    # Account
    "AccountResponse",
    "CreditAccountResponse",
    "LoanResponse",
    "InvestmentAccountResponse",
    # Transaction
    "TransactionResponse",
    "TransactionCreate",
    "TransactionTemplateResponse",
    "TransactionInstanceResponse",
    "TransactionStatusUpdate",
    "TransactionListResponse",
    # Recurring
    "RecurringSeriesCreate",
    "RecurringSeriesUpdate",
    "RecurringSeriesResponse",
    "RecurringSeriesDetail",
    "RecurringSeriesUpdateResponse",
    "GenerateResponse",
    "DeleteResponse",
    # Plan
    "PlanCreate",
    "PlanUpdate",
    "PlanResponse",
    # Ledger
    "LedgerEntryResponse",
    "AccountSnapshotResponse",
    "LedgerTotalsResponse",
    "LedgerRowResponse",
    "LedgerSummaryResponse",
    "LedgerResponse",
]
