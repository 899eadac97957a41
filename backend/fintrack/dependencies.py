"""
FastAPI dependencies.
"""

from typing import Generator
from fastapi import Depends
from sqlalchemy.orm import Session
from fintrack.database import SessionLocal
from fintrack.services.recurring_repository import RecurringRepository


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting database sessions.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_recurring_repository(db: Session = Depends(get_db)) -> RecurringRepository:
    """
    Dependency wrapping the request session in the recurring persistence port.
    """
    return RecurringRepository(db)
