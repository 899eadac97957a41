"""
Database models package.
"""

from fintrack.models.account import (
    Account,
    AccountType,
    CreditAccount,
    Loan,
    InvestmentAccount,
    InvestmentType,
)
from fintrack.models.plan import (
    Plan,
    plan_accounts,
    plan_credit_accounts,
    plan_loans,
    plan_investment_accounts,
)
from fintrack.models.recurring import RecurringSeries, RecurrenceType
from fintrack.models.transaction import Transaction, TransactionType, TransactionStatus

__all__ = [
    "Account",
    "AccountType",
    "CreditAccount",
    "Loan",
    "InvestmentAccount",
    "InvestmentType",
    "Plan",
    "plan_accounts",
    "plan_credit_accounts",
    "plan_loans",
    "plan_investment_accounts",
    "RecurringSeries",
    "RecurrenceType",
    "Transaction",
    "TransactionType",
    "TransactionStatus",
]
