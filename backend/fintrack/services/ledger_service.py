"""
Day-by-day ledger projection for a plan.

The ledger replays a plan's transactions over every calendar day in its
range, carrying each account's balance forward and applying monthly
interest or growth on the last day of each month. All four account
categories run through one accumulator; they differ only in their
``AccountPolicy``.

The projection is a pure derivation: bad or missing input degrades to empty
or zero output instead of raising.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from fintrack.config import settings
from fintrack.models.plan import Plan
from fintrack.services.plan_service import get_plan
from fintrack.services.recurring_repository import RecurringRepository

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
MIN_ACCRUAL = Decimal("0.01")


@dataclass(frozen=True)
class AccountPolicy:
    """How one account category reacts to transactions and accrues interest."""
    category: str
    rate_field: str
    rate_label: str
    accrual_type: str
    incoming_sign: int  # Applied when the account is the transaction's to side
    outgoing_sign: int  # Applied when the account is the transaction's from side
    incoming_label: str
    outgoing_label: str
    incoming_type: str
    outgoing_type: str


STANDARD_POLICY = AccountPolicy(
    category="standard",
    rate_field="apr",
    rate_label="Interest Earned",
    accrual_type="interest",
    incoming_sign=1,
    outgoing_sign=-1,
    incoming_label="Income",
    outgoing_label="Expense",
    incoming_type="incoming",
    outgoing_type="outgoing",
)

# Balance is the amount owed: payments reduce it, spending raises it
CREDIT_POLICY = AccountPolicy(
    category="credit",
    rate_field="interest_rate",
    rate_label="Interest Charged",
    accrual_type="interest",
    incoming_sign=-1,
    outgoing_sign=1,
    incoming_label="Credit Card Payment",
    outgoing_label="Credit Card Spending",
    incoming_type="payment",
    outgoing_type="spending",
)

# Money flowing to a loan is new principal; money flowing from it is a payment.
# Direction is taken from the account sides, not the transaction type.
LOAN_POLICY = AccountPolicy(
    category="loan",
    rate_field="interest_rate",
    rate_label="Interest Charged",
    accrual_type="interest",
    incoming_sign=1,
    outgoing_sign=-1,
    incoming_label="Loan Disbursement",
    outgoing_label="Loan Payment",
    incoming_type="disbursement",
    outgoing_type="payment",
)

INVESTMENT_POLICY = AccountPolicy(
    category="investment",
    rate_field="expected_return",
    rate_label="Investment Growth",
    accrual_type="growth",
    incoming_sign=1,
    outgoing_sign=-1,
    incoming_label="Investment Deposit",
    outgoing_label="Investment Withdrawal",
    incoming_type="deposit",
    outgoing_type="withdrawal",
)


@dataclass
class PlanAccounts:
    """The four account lists linked to a plan."""
    standard: List[Any] = field(default_factory=list)
    credit: List[Any] = field(default_factory=list)
    loans: List[Any] = field(default_factory=list)
    investments: List[Any] = field(default_factory=list)

    def by_policy(self):
        return (
            (STANDARD_POLICY, self.standard),
            (CREDIT_POLICY, self.credit),
            (LOAN_POLICY, self.loans),
            (INVESTMENT_POLICY, self.investments),
        )

    @classmethod
    def from_plan(cls, plan: Plan) -> "PlanAccounts":
        return cls(
            standard=list(plan.accounts),
            credit=list(plan.credit_accounts),
            loans=list(plan.loans),
            investments=list(plan.investment_accounts),
        )


@dataclass
class LedgerEntry:
    id: str
    description: str
    amount: Decimal
    type: str


@dataclass
class AccountSnapshot:
    name: str
    balance: Decimal
    transactions: Optional[Decimal] = None  # None when the day's deltas sum to exactly zero
    transactions_detail: Optional[List[LedgerEntry]] = None
    interest_applied: Optional[Decimal] = None


@dataclass
class LedgerTotals:
    standard_balance: Decimal = ZERO
    credit_balance: Decimal = ZERO
    loan_balance: Decimal = ZERO
    investment_balance: Decimal = ZERO
    total: Decimal = ZERO
    projected_total: Decimal = ZERO


@dataclass
class LedgerRow:
    date: date
    day_of_week: str
    standard_accounts: Dict[str, AccountSnapshot] = field(default_factory=dict)
    credit_accounts: Dict[str, AccountSnapshot] = field(default_factory=dict)
    loan_accounts: Dict[str, AccountSnapshot] = field(default_factory=dict)
    investment_accounts: Dict[str, AccountSnapshot] = field(default_factory=dict)
    totals: LedgerTotals = field(default_factory=LedgerTotals)

    def snapshots(self, policy: AccountPolicy) -> Dict[str, AccountSnapshot]:
        return getattr(self, f"{policy.category}_accounts")


@dataclass
class LedgerSummary:
    current_net_worth: Decimal
    projected_final_value: Decimal
    growth_rate_pct: Optional[float]


@dataclass
class PlanLedger:
    plan: Plan
    rows: List[LedgerRow]
    summary: LedgerSummary


def _as_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _as_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return ZERO


def is_last_day_of_month(day: date) -> bool:
    return (day + timedelta(days=1)).month != day.month


def accumulate_account(
    account: Any,
    policy: AccountPolicy,
    day: date,
    opening_balance: Decimal,
    day_transactions: Iterable[Any]
) -> AccountSnapshot:
    """Apply one day of transactions and any month-end accrual to a single account."""
    balance = opening_balance
    delta = ZERO
    detail: List[LedgerEntry] = []

    for txn in day_transactions:
        amount = _as_decimal(txn.amount)
        if txn.to_account_id == account.id:
            signed = amount * policy.incoming_sign
            balance += signed
            delta += signed
            detail.append(LedgerEntry(
                id=str(txn.id),
                description=txn.description or policy.incoming_label,
                amount=signed,
                type=policy.incoming_type,
            ))
        if txn.from_account_id == account.id:
            signed = amount * policy.outgoing_sign
            balance += signed
            delta += signed
            detail.append(LedgerEntry(
                id=str(txn.id),
                description=txn.description or policy.outgoing_label,
                amount=signed,
                type=policy.outgoing_type,
            ))

    accrual = ZERO
    rate = _as_decimal(getattr(account, policy.rate_field, None))
    if is_last_day_of_month(day) and rate > 0 and balance > 0:
        accrual = balance * rate / 100 / 12
        balance += accrual
        if abs(accrual) >= MIN_ACCRUAL:
            delta += accrual
            detail.append(LedgerEntry(
                id=f"{policy.accrual_type}-{day.isoformat()}-{account.id}",
                description=policy.rate_label,
                amount=accrual,
                type=policy.accrual_type,
            ))

    return AccountSnapshot(
        name=account.name,
        balance=balance,
        transactions=delta if delta != 0 else None,
        transactions_detail=detail or None,
        interest_applied=accrual if accrual != 0 else None,
    )


def build_ledger(
    plan: Any,
    accounts: Optional[PlanAccounts],
    transactions: Iterable[Any],
    today: Optional[date] = None
) -> List[LedgerRow]:
    """
    Build one LedgerRow per day from the plan's start date to its end date.

    Day one opens from each account's stored balance; every later day opens
    from the previous row. Transactions apply in the order given. Future
    rows carry a linear projection of the total.
    """
    if plan is None:
        return []
    start = _as_date(getattr(plan, "start_date", None))
    end = _as_date(getattr(plan, "end_date", None))
    if start is None or end is None or end <= start:
        return []

    today = today or date.today()
    accounts = accounts or PlanAccounts()
    growth = Decimal(str(settings.projection_daily_growth))

    by_date: Dict[date, List[Any]] = defaultdict(list)
    for txn in transactions:
        txn_date = _as_date(txn.date)
        if txn_date is not None:
            by_date[txn_date].append(txn)

    closing: Dict[str, Dict[str, Decimal]] = defaultdict(dict)
    rows: List[LedgerRow] = []
    day = start
    while day <= end:
        row = LedgerRow(date=day, day_of_week=day.strftime("%A"))
        day_transactions = by_date.get(day, [])

        for policy, account_list in accounts.by_policy():
            subtotal = ZERO
            for account in account_list:
                opening = closing[policy.category].get(account.id)
                if opening is None:
                    opening = _as_decimal(account.balance)
                snapshot = accumulate_account(account, policy, day, opening, day_transactions)
                row.snapshots(policy)[account.id] = snapshot
                closing[policy.category][account.id] = snapshot.balance
                subtotal += snapshot.balance
            setattr(row.totals, f"{policy.category}_balance", subtotal)

        totals = row.totals
        totals.total = (
            totals.standard_balance + totals.investment_balance
            - totals.credit_balance - totals.loan_balance
        )
        days_from_today = (day - today).days
        if days_from_today <= 0:
            totals.projected_total = totals.total
        else:
            totals.projected_total = totals.total * (1 + growth * days_from_today)

        rows.append(row)
        day += timedelta(days=1)

    return rows


def summarize_ledger(rows: List[LedgerRow], today: Optional[date] = None) -> LedgerSummary:
    """Headline figures: today's net worth, final projected value, growth over the plan."""
    today = today or date.today()
    current = next((row.totals.total for row in rows if row.date == today), ZERO)
    projected_final = rows[-1].totals.projected_total if rows else ZERO

    growth_rate = None
    if len(rows) >= 2:
        first_total = rows[0].totals.total
        last_total = rows[-1].totals.total
        if first_total > 0:
            growth_rate = round(float((last_total / first_total - 1) * 100), 2)

    return LedgerSummary(
        current_net_worth=current,
        projected_final_value=projected_final,
        growth_rate_pct=growth_rate,
    )


def get_plan_ledger(db: Session, plan_id: str, today: Optional[date] = None) -> PlanLedger:
    """Load a plan, its linked accounts and its transactions, then project the ledger."""
    plan = get_plan(db, plan_id)

    transactions = []
    if plan.start_date and plan.end_date:
        transactions = RecurringRepository(db).list_transactions_in_range(plan.start_date, plan.end_date)

    rows = build_ledger(plan, PlanAccounts.from_plan(plan), transactions, today=today)
    logger.info(f"Built {len(rows)} ledger rows for plan {plan_id} from {len(transactions)} transactions")
    return PlanLedger(plan=plan, rows=rows, summary=summarize_ledger(rows, today=today))
