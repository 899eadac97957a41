"""Tests for one-off transactions."""

import pytest
from datetime import date
from decimal import Decimal

from fintrack.exceptions import NotFoundError, ValidationError
from fintrack.models.transaction import Transaction, TransactionStatus, TransactionType
from fintrack.services import transaction_service

TODAY = date(2024, 3, 15)


def deposit(account_id, **overrides):
    data = {
        "transaction_type": "deposit",
        "to_account_id": account_id,
        "amount": "250.00",
        "date": "2024-03-01",
        "description": "Birthday gift",
    }
    data.update(overrides)
    return data


class TestCreateTransaction:
    """Test manual transaction entry."""

    def test_create_deposit(self, db_session, checking_account):
        """Should persist a standalone transaction outside any series."""
        txn = transaction_service.create_transaction(db_session, deposit(checking_account.id), today=TODAY)

        assert txn.id is not None
        assert txn.transaction_type == TransactionType.deposit
        assert txn.to_account_id == checking_account.id
        assert txn.from_account_id is None
        assert txn.amount == Decimal("250.00")
        assert txn.date == date(2024, 3, 1)
        assert txn.recurring_series_id is None
        assert txn.is_recurring_template is False
        assert db_session.query(Transaction).count() == 1

    @pytest.mark.parametrize("on, expected", [
        ("2024-03-01", TransactionStatus.posted),
        ("2024-03-15", TransactionStatus.created),
        ("2024-04-01", TransactionStatus.scheduled),
    ])
    def test_status_defaults_from_date(self, db_session, checking_account, on, expected):
        """Past dates are Posted, future ones Scheduled, today's stay Created."""
        txn = transaction_service.create_transaction(
            db_session, deposit(checking_account.id, date=on), today=TODAY
        )
        assert txn.status == expected

    def test_explicit_status_wins(self, db_session, checking_account):
        """A submitted status is kept even when the date says otherwise."""
        txn = transaction_service.create_transaction(
            db_session, deposit(checking_account.id, date="2024-04-01", status="Pending"), today=TODAY
        )
        assert txn.status == TransactionStatus.pending

    @pytest.mark.parametrize("overrides, message", [
        ({"date": None}, "date are required"),
        ({"date": "not-a-date"}, "Transaction date is invalid"),
        ({"transaction_type": "gift"}, "Transaction type must be one of"),
        ({"amount": "-5"}, "Amount must be a positive number"),
        ({"amount": "abc"}, "Amount must be a positive number"),
        ({"status": "Lost"}, "Status must be one of"),
        ({"to_account_id": None}, "To account is required"),
    ])
    def test_invalid_input(self, db_session, checking_account, overrides, message):
        """Bad input is rejected before anything is written."""
        with pytest.raises(ValidationError, match=message):
            transaction_service.create_transaction(
                db_session, deposit(checking_account.id, **overrides), today=TODAY
            )
        assert db_session.query(Transaction).count() == 0

    def test_transfer_needs_one_side(self, db_session, checking_account):
        """Transfers accept a single account side but not none."""
        txn = transaction_service.create_transaction(
            db_session,
            {"transaction_type": "transfer", "from_account_id": checking_account.id,
             "amount": "10", "date": "2024-03-01"},
            today=TODAY,
        )
        assert txn.to_account_id is None

        with pytest.raises(ValidationError):
            transaction_service.create_transaction(
                db_session, {"transaction_type": "transfer", "amount": "10", "date": "2024-03-01"}, today=TODAY
            )


class TestDeleteTransaction:
    """Test deleting single transactions."""

    def test_delete(self, db_session, checking_account):
        """Should remove the transaction."""
        txn = transaction_service.create_transaction(db_session, deposit(checking_account.id), today=TODAY)
        transaction_service.delete_transaction(db_session, txn.id)
        assert db_session.query(Transaction).count() == 0

    def test_delete_instance_keeps_series(self, db_session, monthly_series):
        """A generated instance can be removed on its own."""
        instance = db_session.query(Transaction).filter(
            Transaction.recurring_series_id == monthly_series.series.id,
            Transaction.is_recurring_template == False
        ).first()
        transaction_service.delete_transaction(db_session, instance.id)
        assert db_session.query(Transaction).count() == 24

    def test_delete_template_rejected(self, db_session, monthly_series):
        """Templates belong to their series and cannot be deleted directly."""
        with pytest.raises(ValidationError):
            transaction_service.delete_transaction(db_session, monthly_series.template.id)
        assert db_session.query(Transaction).count() == 25

    def test_delete_unknown(self, db_session):
        """Should raise NotFoundError for a missing transaction."""
        with pytest.raises(NotFoundError):
            transaction_service.delete_transaction(db_session, "missing")
