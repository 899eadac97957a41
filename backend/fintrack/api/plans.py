"""
Plan API endpoints: plans, their account links and the projected ledger.
"""

import math
from decimal import Decimal
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fintrack.dependencies import get_db
from fintrack.schemas.plan import PlanCreate, PlanUpdate, PlanResponse
from fintrack.schemas.ledger import (
    LedgerEntryResponse,
    AccountSnapshotResponse,
    LedgerTotalsResponse,
    LedgerRowResponse,
    LedgerSummaryResponse,
    LedgerResponse,
)
from fintrack.services import plan_service, ledger_service
from fintrack.services.ledger_service import AccountSnapshot, LedgerRow

router = APIRouter(prefix="/plans", tags=["plans"])


def _money(value: Decimal) -> float:
    return float(round(value, 2))


def _optional_money(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else _money(value)


def _snapshot_response(snapshot: AccountSnapshot) -> AccountSnapshotResponse:
    detail = None
    if snapshot.transactions_detail is not None:
        detail = [
            LedgerEntryResponse(
                id=entry.id,
                description=entry.description,
                amount=_money(entry.amount),
                type=entry.type,
            )
            for entry in snapshot.transactions_detail
        ]
    return AccountSnapshotResponse(
        name=snapshot.name,
        balance=_money(snapshot.balance),
        transactions=_optional_money(snapshot.transactions),
        transactions_detail=detail,
        interest_applied=_optional_money(snapshot.interest_applied),
    )


def _snapshots(snapshots: Dict[str, AccountSnapshot]) -> Dict[str, AccountSnapshotResponse]:
    return {account_id: _snapshot_response(s) for account_id, s in snapshots.items()}


def _row_response(row: LedgerRow) -> LedgerRowResponse:
    totals = row.totals
    return LedgerRowResponse(
        date=row.date,
        day_of_week=row.day_of_week,
        standard_accounts=_snapshots(row.standard_accounts),
        credit_accounts=_snapshots(row.credit_accounts),
        loan_accounts=_snapshots(row.loan_accounts),
        investment_accounts=_snapshots(row.investment_accounts),
        totals=LedgerTotalsResponse(
            standard_balance=_money(totals.standard_balance),
            credit_balance=_money(totals.credit_balance),
            loan_balance=_money(totals.loan_balance),
            investment_balance=_money(totals.investment_balance),
            total=_money(totals.total),
            projected_total=_money(totals.projected_total),
        ),
    )


@router.get("", response_model=List[PlanResponse])
def list_plans(db: Session = Depends(get_db)):
    """Get all plans ordered by start date."""
    return plan_service.list_plans(db)


@router.post("", response_model=PlanResponse, status_code=201)
def create_plan(data: PlanCreate, db: Session = Depends(get_db)):
    """Create a new plan."""
    return plan_service.create_plan(
        db,
        name=data.name,
        start_date=data.start_date,
        end_date=data.end_date,
        description=data.description,
        target_amount=data.target_amount,
    )


@router.get("/{plan_id}", response_model=PlanResponse)
def get_plan(plan_id: str, db: Session = Depends(get_db)):
    """Get a plan with its linked accounts."""
    return plan_service.get_plan(db, plan_id)


@router.put("/{plan_id}", response_model=PlanResponse)
def update_plan(plan_id: str, data: PlanUpdate, db: Session = Depends(get_db)):
    """Update plan fields. Only the fields sent are changed."""
    return plan_service.update_plan(db, plan_id, data.model_dump(exclude_unset=True))


@router.delete("/{plan_id}")
def delete_plan(plan_id: str, db: Session = Depends(get_db)):
    """Delete a plan. Linked accounts are untouched."""
    plan_service.delete_plan(db, plan_id)
    return {"deleted": True}


@router.get("/{plan_id}/ledger", response_model=LedgerResponse)
def get_plan_ledger(
    plan_id: str,
    page: int = Query(1, ge=1),
    per_page: int = Query(30, ge=1, le=366),
    db: Session = Depends(get_db)
):
    """Day-by-day projected balances for a plan, one page of rows at a time."""
    ledger = ledger_service.get_plan_ledger(db, plan_id)

    total_rows = len(ledger.rows)
    pages = max(1, math.ceil(total_rows / per_page))
    offset = (page - 1) * per_page
    page_rows = ledger.rows[offset:offset + per_page]

    summary = ledger.summary
    return LedgerResponse(
        plan_id=ledger.plan.id,
        start_date=ledger.plan.start_date,
        end_date=ledger.plan.end_date,
        rows=[_row_response(row) for row in page_rows],
        total_rows=total_rows,
        page=page,
        per_page=per_page,
        pages=pages,
        summary=LedgerSummaryResponse(
            current_net_worth=_money(summary.current_net_worth),
            projected_final_value=_money(summary.projected_final_value),
            growth_rate_pct=summary.growth_rate_pct,
        ),
    )


@router.post("/{plan_id}/{category}/{account_id}", response_model=PlanResponse)
def link_account(plan_id: str, category: str, account_id: str, db: Session = Depends(get_db)):
    """Link an account to a plan. category is accounts, credit-accounts, loans or investment-accounts."""
    return plan_service.link_account(db, plan_id, category, account_id)


@router.delete("/{plan_id}/{category}/{account_id}", response_model=PlanResponse)
def unlink_account(plan_id: str, category: str, account_id: str, db: Session = Depends(get_db)):
    """Remove an account from a plan."""
    return plan_service.unlink_account(db, plan_id, category, account_id)
