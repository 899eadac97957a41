"""Service for one-off transactions, lookups and manual status changes."""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from fintrack.exceptions import NotFoundError, ValidationError
from fintrack.models.transaction import Transaction, TransactionStatus
from fintrack.services.recurring_service import validate_template_data

logger = logging.getLogger(__name__)


def parse_status(value) -> TransactionStatus:
    try:
        return TransactionStatus(value)
    except ValueError:
        valid = ", ".join(s.value for s in TransactionStatus)
        raise ValidationError(f"Status must be one of: {valid}") from None


def list_transactions(
    db: Session,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[str] = None,
    account_id: Optional[str] = None,
    include_templates: bool = False
) -> List[Transaction]:
    """Transactions matching the filters, oldest first."""
    query = db.query(Transaction)

    if not include_templates:
        query = query.filter(Transaction.is_recurring_template == False)
    if start_date:
        query = query.filter(Transaction.date >= start_date)
    if end_date:
        query = query.filter(Transaction.date <= end_date)
    if status:
        query = query.filter(Transaction.status == parse_status(status))
    if account_id:
        query = query.filter(
            or_(Transaction.from_account_id == account_id, Transaction.to_account_id == account_id)
        )

    return query.order_by(Transaction.date, Transaction.created_at).all()


def get_transaction(db: Session, transaction_id: str) -> Transaction:
    transaction = db.query(Transaction).filter(Transaction.id == transaction_id).first()
    if not transaction:
        raise NotFoundError(f"No transaction found with id {transaction_id}")
    return transaction


def update_transaction_status(db: Session, transaction_id: str, status) -> Transaction:
    """
    Move a transaction to a new status. This is the only path by which a
    generated instance leaves the status it was given at generation time.
    """
    if not status:
        raise ValidationError("Status is required")
    new_status = parse_status(status)

    transaction = get_transaction(db, transaction_id)
    previous = transaction.status
    transaction.status = new_status
    db.commit()
    db.refresh(transaction)

    logger.info(f"Transaction {transaction_id} status {previous.value} -> {new_status.value}")
    return transaction


def create_transaction(db: Session, transaction_data: Dict[str, Any], today: Optional[date] = None) -> Transaction:
    """
    Record a one-off transaction.

    Type, amount and account sides are checked the same way as a series
    template. Without an explicit status the date decides it: future dates are
    Scheduled, past dates Posted, and today's transactions stay Created.
    """
    if not transaction_data.get("date"):
        raise ValidationError("Transaction type, amount, and date are required")
    cleaned = validate_template_data(transaction_data)

    if transaction_data.get("status"):
        cleaned["status"] = parse_status(transaction_data["status"])
    else:
        today = today or date.today()
        if cleaned["date"] > today:
            cleaned["status"] = TransactionStatus.scheduled
        elif cleaned["date"] < today:
            cleaned["status"] = TransactionStatus.posted
        else:
            cleaned["status"] = TransactionStatus.created

    transaction = Transaction(**cleaned)
    db.add(transaction)
    db.commit()
    db.refresh(transaction)

    logger.info(
        f"Created {transaction.transaction_type.value} transaction {transaction.id} "
        f"for {transaction.amount} on {transaction.date}"
    )
    return transaction


def delete_transaction(db: Session, transaction_id: str) -> None:
    transaction = get_transaction(db, transaction_id)
    if transaction.is_recurring_template:
        raise ValidationError("Recurring templates are removed by deleting their series")
    db.delete(transaction)
    db.commit()
    logger.info(f"Deleted transaction {transaction_id}")
