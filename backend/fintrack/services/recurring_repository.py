"""Persistence port for the recurring transaction engine."""

import logging
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fintrack.exceptions import PersistenceError
from fintrack.models.plan import Plan
from fintrack.models.recurring import RecurringSeries
from fintrack.models.transaction import Transaction

logger = logging.getLogger(__name__)


class RecurringRepository:
    """
    Series/template/instance storage over a SQLAlchemy session.

    Mutating methods only flush; the caller groups them with ``atomic()`` so
    that a whole service operation commits or rolls back together.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def atomic(self) -> Iterator["RecurringRepository"]:
        """Commit everything issued inside the block, or roll all of it back."""
        try:
            yield self
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Recurring operation rolled back: {e}")
            raise PersistenceError("Failed to save recurring transaction changes") from e
        except Exception:
            self.db.rollback()
            raise

    # Series

    def get_series(self, series_id: str) -> Optional[RecurringSeries]:
        return self.db.query(RecurringSeries).filter(RecurringSeries.id == series_id).first()

    def list_series(self) -> List[RecurringSeries]:
        return self.db.query(RecurringSeries).order_by(RecurringSeries.created_at.desc()).all()

    def insert_series(self, **fields) -> RecurringSeries:
        series = RecurringSeries(**fields)
        self.db.add(series)
        self.db.flush()
        return series

    def update_series(self, series: RecurringSeries, fields: Dict[str, Any]) -> RecurringSeries:
        for field, value in fields.items():
            setattr(series, field, value)
        self.db.flush()
        return series

    def delete_series(self, series: RecurringSeries) -> None:
        self.db.delete(series)
        self.db.flush()

    # Template and instances

    def get_template(self, series_id: str) -> Optional[Transaction]:
        return self.db.query(Transaction).filter(
            Transaction.recurring_series_id == series_id,
            Transaction.is_recurring_template == True
        ).first()

    def list_instances(self, series_id: str) -> List[Transaction]:
        return self.db.query(Transaction).filter(
            Transaction.recurring_series_id == series_id,
            Transaction.is_recurring_template == False
        ).order_by(Transaction.date).all()

    def latest_instance_date(self, series_id: str) -> Optional[date]:
        return self.db.query(func.max(Transaction.date)).filter(
            Transaction.recurring_series_id == series_id,
            Transaction.is_recurring_template == False
        ).scalar()

    def instance_exists(self, series_id: str, on_date: date) -> bool:
        return self.db.query(Transaction.id).filter(
            Transaction.recurring_series_id == series_id,
            Transaction.is_recurring_template == False,
            Transaction.date == on_date
        ).first() is not None

    def insert_transaction(self, **fields) -> Transaction:
        transaction = Transaction(**fields)
        self.db.add(transaction)
        self.db.flush()
        return transaction

    def update_transaction(self, transaction: Transaction, fields: Dict[str, Any]) -> Transaction:
        for field, value in fields.items():
            setattr(transaction, field, value)
        self.db.flush()
        return transaction

    def update_instances(
        self,
        series_id: str,
        fields: Dict[str, Any],
        date_from: Optional[date] = None
    ) -> int:
        """Apply ``fields`` to the series' instances, optionally only those dated on/after date_from."""
        if not fields:
            return 0
        query = self.db.query(Transaction).filter(
            Transaction.recurring_series_id == series_id,
            Transaction.is_recurring_template == False
        )
        if date_from is not None:
            query = query.filter(Transaction.date >= date_from)
        return query.update(
            {getattr(Transaction, field): value for field, value in fields.items()},
            synchronize_session=False
        )

    def delete_transactions_where(
        self,
        series_id: str,
        date_from: Optional[date] = None,
        exclude_template: bool = True
    ) -> int:
        query = self.db.query(Transaction).filter(Transaction.recurring_series_id == series_id)
        if exclude_template:
            query = query.filter(Transaction.is_recurring_template == False)
        if date_from is not None:
            query = query.filter(Transaction.date >= date_from)
        return query.delete(synchronize_session=False)

    def delete_template(self, series_id: str) -> int:
        return self.db.query(Transaction).filter(
            Transaction.recurring_series_id == series_id,
            Transaction.is_recurring_template == True
        ).delete(synchronize_session=False)

    def unlink_instances(self, series_id: str) -> int:
        """Detach remaining instances so they survive as standalone transactions."""
        return self.db.query(Transaction).filter(
            Transaction.recurring_series_id == series_id
        ).update(
            {Transaction.recurring_series_id: None},
            synchronize_session=False
        )

    # Ledger and heuristic inputs

    def list_transactions_in_range(self, start_date: date, end_date: date) -> List[Transaction]:
        """Non-template transactions dated within [start_date, end_date], oldest first."""
        return self.db.query(Transaction).filter(
            Transaction.is_recurring_template == False,
            Transaction.date >= start_date,
            Transaction.date <= end_date
        ).order_by(Transaction.date, Transaction.created_at).all()

    def max_plan_end_date(self) -> Optional[date]:
        return self.db.query(func.max(Plan.end_date)).scalar()
