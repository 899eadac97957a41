"""API endpoints for recurring transaction series."""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from datetime import date

from fintrack.dependencies import get_recurring_repository
from fintrack.schemas.recurring import (
    RecurringSeriesCreate,
    RecurringSeriesUpdate,
    RecurringSeriesResponse,
    RecurringSeriesDetail,
    RecurringSeriesUpdateResponse,
    GenerateResponse,
    DeleteResponse,
)
from fintrack.schemas.transaction import TransactionTemplateResponse, TransactionInstanceResponse
from fintrack.services import recurring_service
from fintrack.services.recurring_repository import RecurringRepository

router = APIRouter(prefix="/recurring", tags=["recurring"])


def _detail_response(series, template, instances) -> RecurringSeriesDetail:
    return RecurringSeriesDetail(
        series=RecurringSeriesResponse.model_validate(series),
        template=TransactionTemplateResponse.model_validate(template) if template else None,
        instances=[TransactionInstanceResponse.model_validate(t) for t in instances],
    )


@router.get("", response_model=List[RecurringSeriesResponse])
def list_recurring_series(repo: RecurringRepository = Depends(get_recurring_repository)):
    """Get all recurring series, newest first."""
    return recurring_service.list_series(repo)


@router.get("/{series_id}", response_model=RecurringSeriesDetail)
def get_recurring_series(
    series_id: str,
    repo: RecurringRepository = Depends(get_recurring_repository)
):
    """Get a series with its template and generated transactions."""
    detail = recurring_service.get_series_detail(repo, series_id)
    return _detail_response(detail.series, detail.template, detail.instances)


@router.post("", response_model=RecurringSeriesDetail, status_code=201)
def create_recurring_series(
    data: RecurringSeriesCreate,
    repo: RecurringRepository = Depends(get_recurring_repository)
):
    """
    Create a series and its template transaction, then generate the first
    batch of instances. The batch is stretched toward the furthest plan end
    date so new series show up in existing ledgers.
    """
    result = recurring_service.create_recurring_series(
        repo,
        data.series_data(),
        data.template_data(),
        horizon_hint=repo.max_plan_end_date(),
    )
    return _detail_response(result.series, result.template, result.instances)


@router.put("/{series_id}", response_model=RecurringSeriesUpdateResponse)
def update_recurring_series(
    series_id: str,
    data: RecurringSeriesUpdate,
    repo: RecurringRepository = Depends(get_recurring_repository)
):
    """Update a series; update_scope decides which instances follow template changes."""
    result = recurring_service.update_recurring_series(
        repo,
        series_id,
        series_data=data.series_data(),
        template_data=data.template_data(),
        update_scope=data.update_scope,
    )
    return RecurringSeriesUpdateResponse(
        series=RecurringSeriesResponse.model_validate(result.series),
        template=TransactionTemplateResponse.model_validate(result.template) if result.template else None,
        update_scope=result.update_scope,
        updated_count=result.updated_count,
        regenerated=[TransactionInstanceResponse.model_validate(t) for t in result.regenerated],
    )


@router.delete("/{series_id}", response_model=DeleteResponse)
def delete_recurring_series(
    series_id: str,
    keep_instances: bool = Query(False),
    repo: RecurringRepository = Depends(get_recurring_repository)
):
    """Delete a series, optionally keeping its instances as standalone transactions."""
    result = recurring_service.delete_recurring_series(repo, series_id, keep_instances=keep_instances)
    message = (
        "Recurring series deleted, generated transactions kept"
        if result.kept_instances
        else "Recurring series and its transactions deleted"
    )
    return DeleteResponse(deleted=result.deleted, kept_instances=result.kept_instances, message=message)


@router.post("/{series_id}/generate", response_model=GenerateResponse)
def generate_recurring_transactions(
    series_id: str,
    start_from: Optional[date] = None,
    regenerate_all: bool = Query(False),
    repo: RecurringRepository = Depends(get_recurring_repository)
):
    """Generate the next batch of instances, or rebuild them from start_from."""
    created = recurring_service.generate_recurring_transactions(
        repo,
        series_id,
        start_from=start_from,
        regenerate_all=regenerate_all,
    )
    return GenerateResponse(
        results=len(created),
        items=[TransactionInstanceResponse.model_validate(t) for t in created],
    )
