"""Pydantic schemas for recurring transaction series."""

from pydantic import BaseModel
from typing import Any, Optional, List
from datetime import date, datetime

from fintrack.models.recurring import RecurrenceType
from fintrack.schemas.transaction import TransactionTemplateResponse, TransactionInstanceResponse


# Dates, interval and amount are taken as submitted; recurring_service parses them
# and rejects bad values with a 400.
class RecurringSeriesCreate(BaseModel):
    """Series fields plus the template transaction, submitted together."""
    # Series
    name: Optional[str] = None
    description: Optional[str] = None
    recurrence_type: Optional[str] = None
    recurrence_interval: Any = None
    start_date: Any = None
    end_date: Any = None

    # Template transaction
    transaction_type: Optional[str] = None
    from_account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    amount: Any = None
    transaction_date: Any = None
    transaction_description: Optional[str] = None

    def series_data(self) -> dict:
        return self.model_dump(
            include={"name", "description", "recurrence_type", "recurrence_interval", "start_date", "end_date"}
        )

    def template_data(self) -> dict:
        return {
            "transaction_type": self.transaction_type,
            "from_account_id": self.from_account_id,
            "to_account_id": self.to_account_id,
            "amount": self.amount,
            "date": self.transaction_date,
            "description": self.transaction_description,
        }


class RecurringSeriesUpdate(BaseModel):
    # Series
    name: Optional[str] = None
    description: Optional[str] = None
    recurrence_type: Optional[str] = None
    recurrence_interval: Any = None
    start_date: Any = None
    end_date: Any = None  # Always applied: omitting it clears the end date

    # Template transaction
    transaction_type: Optional[str] = None
    from_account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    amount: Any = None
    transaction_description: Optional[str] = None

    update_scope: str = "none"  # none, future, all

    def series_data(self) -> dict:
        return self.model_dump(
            include={"name", "description", "recurrence_type", "recurrence_interval", "start_date", "end_date"},
            exclude_unset=True,
        )

    def template_data(self) -> Optional[dict]:
        """Template changes, or None when the request touches no template field."""
        submitted = self.model_dump(exclude_unset=True)
        data = {
            key: submitted[key]
            for key in ("transaction_type", "from_account_id", "to_account_id", "amount")
            if key in submitted
        }
        if "transaction_description" in submitted:
            data["description"] = submitted["transaction_description"]
        return data or None


class RecurringSeriesResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    recurrence_type: RecurrenceType
    recurrence_interval: int
    start_date: date
    end_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RecurringSeriesDetail(BaseModel):
    """Series with its template and generated instances."""
    series: RecurringSeriesResponse
    template: Optional[TransactionTemplateResponse] = None
    instances: List[TransactionInstanceResponse] = []

    class Config:
        from_attributes = True


class RecurringSeriesUpdateResponse(BaseModel):
    series: RecurringSeriesResponse
    template: Optional[TransactionTemplateResponse] = None
    update_scope: str
    updated_count: int
    regenerated: List[TransactionInstanceResponse] = []

    class Config:
        from_attributes = True


class GenerateResponse(BaseModel):
    """Instances created by a generate call."""
    results: int
    items: List[TransactionInstanceResponse]


class DeleteResponse(BaseModel):
    deleted: bool
    kept_instances: bool
    message: str
