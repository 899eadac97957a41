"""
Transaction API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date

from fintrack.dependencies import get_db
from fintrack.schemas.transaction import (
    TransactionResponse,
    TransactionCreate,
    TransactionStatusUpdate,
    TransactionListResponse
)
from fintrack.services import transaction_service

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[str] = None,
    account_id: Optional[str] = None,
    include_templates: bool = False,
    db: Session = Depends(get_db)
):
    """List transactions with filtering, oldest first"""
    items = transaction_service.list_transactions(
        db,
        start_date=start_date,
        end_date=end_date,
        status=status,
        account_id=account_id,
        include_templates=include_templates,
    )
    return TransactionListResponse(
        items=[TransactionResponse.model_validate(t) for t in items],
        total=len(items),
    )


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(data: TransactionCreate, db: Session = Depends(get_db)):
    """Record a one-off transaction. Status defaults from the date when not given."""
    return transaction_service.create_transaction(db, data.model_dump())


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(transaction_id: str, db: Session = Depends(get_db)):
    """Get single transaction"""
    return transaction_service.get_transaction(db, transaction_id)


@router.patch("/{transaction_id}/status", response_model=TransactionResponse)
def update_transaction_status(
    transaction_id: str,
    data: TransactionStatusUpdate,
    db: Session = Depends(get_db)
):
    """Move a transaction to a new status (e.g. Scheduled -> Posted)"""
    return transaction_service.update_transaction_status(db, transaction_id, data.status)


@router.delete("/{transaction_id}")
def delete_transaction(transaction_id: str, db: Session = Depends(get_db)):
    """Delete a one-off transaction or a single generated instance"""
    transaction_service.delete_transaction(db, transaction_id)
    return {"deleted": True}
