"""Service for plans and their account links."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from fintrack.exceptions import NotFoundError, ValidationError
from fintrack.models.account import Account, CreditAccount, Loan, InvestmentAccount
from fintrack.models.plan import Plan

logger = logging.getLogger(__name__)


# URL category -> (account model, Plan relationship attribute)
ACCOUNT_CATEGORIES = {
    "accounts": (Account, "accounts"),
    "credit-accounts": (CreditAccount, "credit_accounts"),
    "loans": (Loan, "loans"),
    "investment-accounts": (InvestmentAccount, "investment_accounts"),
}


def get_plan(db: Session, plan_id: str) -> Plan:
    plan = db.query(Plan).filter(Plan.id == plan_id).first()
    if not plan:
        raise NotFoundError(f"No plan found with id {plan_id}")
    return plan


def list_plans(db: Session) -> List[Plan]:
    return db.query(Plan).order_by(Plan.start_date).all()


def create_plan(
    db: Session,
    name: str,
    start_date: date,
    end_date: date,
    description: Optional[str] = None,
    target_amount: Optional[Decimal] = None
) -> Plan:
    """Create a plan; its end date must fall strictly after its start date."""
    if end_date <= start_date:
        raise ValidationError("End date must be after start date")
    if target_amount is not None and target_amount < 0:
        raise ValidationError("Target amount cannot be negative")

    plan = Plan(
        name=name,
        description=description,
        start_date=start_date,
        end_date=end_date,
        target_amount=target_amount,
    )
    db.add(plan)
    db.commit()
    db.refresh(plan)
    logger.info(f"Created plan {plan.id} ({start_date} to {end_date})")
    return plan


def update_plan(db: Session, plan_id: str, changes: Dict[str, Any]) -> Plan:
    """
    Apply the given field changes. name and the dates cannot be cleared;
    description and target_amount can. The resulting range must still end
    after it starts.
    """
    plan = get_plan(db, plan_id)
    changes = {
        key: value for key, value in changes.items()
        if value is not None or key in ("description", "target_amount")
    }

    start_date = changes.get("start_date", plan.start_date)
    end_date = changes.get("end_date", plan.end_date)
    if end_date <= start_date:
        raise ValidationError("End date must be after start date")
    target_amount = changes.get("target_amount")
    if target_amount is not None and target_amount < 0:
        raise ValidationError("Target amount cannot be negative")

    for key, value in changes.items():
        setattr(plan, key, value)
    db.commit()
    db.refresh(plan)
    logger.info(f"Updated plan {plan.id}: {', '.join(changes) or 'no changes'}")
    return plan


def delete_plan(db: Session, plan_id: str) -> None:
    plan = get_plan(db, plan_id)
    db.delete(plan)
    db.commit()


def _resolve_account(db: Session, category: str, account_id: str):
    if category not in ACCOUNT_CATEGORIES:
        valid = ", ".join(ACCOUNT_CATEGORIES)
        raise ValidationError(f"Account category must be one of: {valid}")
    model, attribute = ACCOUNT_CATEGORIES[category]
    account = db.query(model).filter(model.id == account_id).first()
    if not account:
        raise NotFoundError(f"No account found with id {account_id}")
    return account, attribute


def link_account(db: Session, plan_id: str, category: str, account_id: str) -> Plan:
    """Attach an account of the given category to a plan. Linking twice is a no-op."""
    plan = get_plan(db, plan_id)
    account, attribute = _resolve_account(db, category, account_id)
    linked = getattr(plan, attribute)
    if account not in linked:
        linked.append(account)
        db.commit()
        db.refresh(plan)
    return plan


def unlink_account(db: Session, plan_id: str, category: str, account_id: str) -> Plan:
    plan = get_plan(db, plan_id)
    account, attribute = _resolve_account(db, category, account_id)
    linked = getattr(plan, attribute)
    if account not in linked:
        raise NotFoundError(f"Account {account_id} is not linked to plan {plan_id}")
    linked.remove(account)
    db.commit()
    db.refresh(plan)
    return plan
