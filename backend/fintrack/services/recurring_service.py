"""Service for recurring transaction series: creation, updates, generation and deletion."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from fintrack.config import settings
from fintrack.exceptions import NotFoundError, ValidationError
from fintrack.models.recurring import RecurringSeries, RecurrenceType
from fintrack.models.transaction import Transaction, TransactionType, TransactionStatus
from fintrack.services.recurrence import calculate_occurrences, occurrence_budget, scheduled_occurrences
from fintrack.services.recurring_repository import RecurringRepository

logger = logging.getLogger(__name__)


UPDATE_SCOPES = ("none", "future", "all")

# Account side(s) a transaction type must reference. "either" = at least one.
REQUIRED_ACCOUNTS = {
    TransactionType.deposit: "to",
    TransactionType.interest_earned: "to",
    TransactionType.withdraw: "from",
    TransactionType.interest_paid: "from",
    TransactionType.transfer: "either",
    TransactionType.loan_payment: "to",
    TransactionType.credit_card_spending: "to",
    TransactionType.credit_card_payment: "to",
}

RECURRENCE_FIELDS = ("recurrence_type", "recurrence_interval", "start_date", "end_date")


@dataclass
class SeriesCreateResult:
    series: RecurringSeries
    template: Transaction
    instances: List[Transaction] = field(default_factory=list)


@dataclass
class SeriesUpdateResult:
    series: RecurringSeries
    template: Optional[Transaction]
    update_scope: str
    updated_count: int = 0
    regenerated: List[Transaction] = field(default_factory=list)


@dataclass
class SeriesDeleteResult:
    series_id: str
    deleted: bool
    kept_instances: bool


@dataclass
class SeriesDetail:
    series: RecurringSeries
    template: Optional[Transaction]
    instances: List[Transaction] = field(default_factory=list)


# Validation

def _parse_date(value, label: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    raise ValidationError(f"{label} is invalid")


def _positive_interval(value) -> int:
    if isinstance(value, bool):
        raise ValidationError("Recurrence interval must be a positive number")
    try:
        interval = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError("Recurrence interval must be a positive number") from None
    if not interval.is_finite() or interval <= 0 or interval != interval.to_integral_value():
        raise ValidationError("Recurrence interval must be a positive number")
    return int(interval)


def _positive_amount(value) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValidationError("Amount must be a positive number")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError("Amount must be a positive number") from None
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Amount must be a positive number")
    return amount


def _recurrence_type(value) -> RecurrenceType:
    try:
        return RecurrenceType(value)
    except ValueError:
        valid = ", ".join(t.value for t in RecurrenceType)
        raise ValidationError(f"Recurrence type must be one of: {valid}") from None


def _transaction_type(value) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError:
        valid = ", ".join(t.value for t in TransactionType)
        raise ValidationError(f"Transaction type must be one of: {valid}") from None


def validate_series_data(series_data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """
    Normalize series fields, raising ValidationError on bad input.
    With partial=True only the keys present are checked and returned.
    """
    if partial:
        # null means "keep" for every field except end_date, which null clears
        series_data = {k: v for k, v in series_data.items() if v is not None or k == "end_date"}
    cleaned: Dict[str, Any] = {}

    if "recurrence_type" in series_data or not partial:
        if not series_data.get("recurrence_type"):
            raise ValidationError("Recurrence type is required")
        cleaned["recurrence_type"] = _recurrence_type(series_data["recurrence_type"])

    interval = series_data.get("recurrence_interval")
    if interval is not None:
        cleaned["recurrence_interval"] = _positive_interval(interval)
    elif not partial:
        cleaned["recurrence_interval"] = 1

    if "start_date" in series_data or not partial:
        if not series_data.get("start_date"):
            raise ValidationError("Start date is required")
        cleaned["start_date"] = _parse_date(series_data["start_date"], "Start date")

    if series_data.get("end_date") is not None:
        cleaned["end_date"] = _parse_date(series_data["end_date"], "End date")
    elif "end_date" in series_data or not partial:
        cleaned["end_date"] = None

    start, end = cleaned.get("start_date"), cleaned.get("end_date")
    if start is not None and end is not None and end < start:
        raise ValidationError("End date must be after start date")

    for key in ("name", "description"):
        if key in series_data:
            cleaned[key] = series_data[key]

    return cleaned


def validate_required_accounts(transaction_type: TransactionType, from_account_id, to_account_id) -> None:
    """Check the account side(s) the transaction type needs are present."""
    required = REQUIRED_ACCOUNTS[transaction_type]
    if required == "to" and not to_account_id:
        raise ValidationError(f"To account is required for {transaction_type.value} transactions")
    if required == "from" and not from_account_id:
        raise ValidationError(f"From account is required for {transaction_type.value} transactions")
    if required == "either" and not (from_account_id or to_account_id):
        raise ValidationError("Transfers require a from account or a to account")


def validate_template_data(template_data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """Normalize template fields, raising ValidationError on bad input."""
    if partial:
        # Account references may be cleared explicitly; other nulls mean "keep"
        template_data = {
            k: v for k, v in template_data.items()
            if v is not None or k in ("from_account_id", "to_account_id")
        }
    cleaned: Dict[str, Any] = {}

    if "transaction_type" in template_data or not partial:
        if not template_data.get("transaction_type"):
            raise ValidationError("Transaction type is required")
        cleaned["transaction_type"] = _transaction_type(template_data["transaction_type"])

    if "amount" in template_data or not partial:
        cleaned["amount"] = _positive_amount(template_data.get("amount"))

    for key in ("from_account_id", "to_account_id", "description"):
        if key in template_data or not partial:
            cleaned[key] = template_data.get(key)

    if template_data.get("date") is not None:
        cleaned["date"] = _parse_date(template_data["date"], "Transaction date")

    if not partial:
        validate_required_accounts(
            cleaned["transaction_type"], cleaned["from_account_id"], cleaned["to_account_id"]
        )

    return cleaned


def validate_update_scope(update_scope: Optional[str]) -> str:
    scope = update_scope or "none"
    if scope not in UPDATE_SCOPES:
        raise ValidationError(f"Update scope must be one of: {', '.join(UPDATE_SCOPES)}")
    return scope


# Generation

def _instance_fields(template: Transaction, series_id: str, occurrence: date, today: date) -> Dict[str, Any]:
    return {
        "transaction_type": template.transaction_type,
        "from_account_id": template.from_account_id,
        "to_account_id": template.to_account_id,
        "amount": template.amount,
        "date": occurrence,
        # Status is fixed here; later transitions go through the status endpoint
        "status": TransactionStatus.posted if occurrence <= today else TransactionStatus.scheduled,
        "description": template.description,
        "recurring_series_id": series_id,
        "is_recurring_template": False,
        "generation_date": datetime.utcnow(),
    }


def _generate(
    repo: RecurringRepository,
    series: RecurringSeries,
    template: Transaction,
    start_from: date,
    regenerate_all: bool,
    today: date
) -> List[Transaction]:
    if regenerate_all:
        repo.delete_transactions_where(series.id, date_from=start_from, exclude_template=True)
        generation_start = start_from
    else:
        latest = repo.latest_instance_date(series.id)
        generation_start = latest + timedelta(days=1) if latest else series.start_date

    occurrences = scheduled_occurrences(series, generation_start, settings.default_occurrence_count)

    created = []
    for occurrence in occurrences:
        if repo.instance_exists(series.id, occurrence):
            continue
        created.append(repo.insert_transaction(**_instance_fields(template, series.id, occurrence, today)))
    return created


def _creation_count(series: RecurringSeries, horizon_hint: Optional[date]) -> int:
    """
    Occurrences to generate for a new series. When the budget stops short of
    ``horizon_hint`` (usually the furthest plan end date) it is doubled, up to
    the configured maximum. Best effort: coverage is not guaranteed.
    """
    count = occurrence_budget(series.recurrence_type, series.start_date, series.end_date)
    if horizon_hint is None or count == 0:
        return count

    projected = calculate_occurrences(series, series.start_date, count)
    if projected and projected[-1] < horizon_hint:
        count = min(settings.max_occurrence_count, count * 2)
    return count


def generate_recurring_transactions(
    repo: RecurringRepository,
    series_id: str,
    start_from: Optional[date] = None,
    regenerate_all: bool = False,
    today: Optional[date] = None
) -> List[Transaction]:
    """
    Generate instances for a series.

    Incremental mode continues the schedule after the latest existing
    instance, at most one batch per call, and skips dates that already have
    one. Once a bounded series reaches its end date, further calls add
    nothing. With regenerate_all, instances dated on/after start_from are
    replaced by the schedule's dates from start_from on.
    """
    today = today or date.today()
    start_from = _parse_date(start_from, "Start date") if start_from is not None else today

    with repo.atomic():
        series = repo.get_series(series_id)
        if not series:
            raise NotFoundError(f"No recurring series found with id {series_id}")
        template = repo.get_template(series_id)
        if not template:
            raise NotFoundError(f"No template transaction found for series {series_id}")

        created = _generate(repo, series, template, start_from, regenerate_all, today)

    logger.info(
        f"Generated {len(created)} transactions for series {series_id} "
        f"(regenerate_all={regenerate_all})"
    )
    return created


# Series lifecycle

def create_recurring_series(
    repo: RecurringRepository,
    series_data: Dict[str, Any],
    template_data: Dict[str, Any],
    horizon_hint: Optional[date] = None,
    today: Optional[date] = None
) -> SeriesCreateResult:
    """
    Create a series, its template transaction and its initial instances in
    one unit of work. Nothing persists if any step fails.
    """
    today = today or date.today()
    series_fields = validate_series_data(series_data)
    template_fields = validate_template_data(template_data)

    if not series_fields.get("name"):
        series_fields["name"] = (
            f"{template_fields['transaction_type'].value} ({series_fields['recurrence_type'].value})"
        )

    with repo.atomic():
        series = repo.insert_series(**series_fields)
        template = repo.insert_transaction(
            transaction_type=template_fields["transaction_type"],
            from_account_id=template_fields["from_account_id"],
            to_account_id=template_fields["to_account_id"],
            amount=template_fields["amount"],
            date=template_fields.get("date") or series.start_date,
            status=TransactionStatus.created,
            description=template_fields["description"],
            recurring_series_id=series.id,
            is_recurring_template=True,
            generation_date=datetime.utcnow(),
        )

        count = _creation_count(series, horizon_hint)
        instances = [
            repo.insert_transaction(**_instance_fields(template, series.id, occurrence, today))
            for occurrence in calculate_occurrences(series, series.start_date, count)
        ]

    logger.info(f"Created recurring series {series.id} with {len(instances)} instances")
    return SeriesCreateResult(series=series, template=template, instances=instances)


def update_recurring_series(
    repo: RecurringRepository,
    series_id: str,
    series_data: Optional[Dict[str, Any]] = None,
    template_data: Optional[Dict[str, Any]] = None,
    update_scope: str = "none",
    today: Optional[date] = None
) -> SeriesUpdateResult:
    """
    Update series metadata and optionally the template and its instances.

    Absent series fields keep their value except end_date, which is always
    written (absent means cleared). update_scope decides which instances
    follow template changes: none, future (dated today or later) or all.
    Changing the recurrence itself replaces every instance dated today or
    later, whatever the scope.
    """
    today = today or date.today()
    scope = validate_update_scope(update_scope)
    series_changes = validate_series_data(series_data or {}, partial=True)
    series_changes.setdefault("end_date", None)
    template_changes = (
        validate_template_data(template_data, partial=True) if template_data is not None else None
    )
    if template_changes is not None:
        template_changes.pop("date", None)

    with repo.atomic():
        series = repo.get_series(series_id)
        if not series:
            raise NotFoundError(f"No recurring series found with id {series_id}")
        template = repo.get_template(series_id)
        if not template:
            raise NotFoundError(f"No template transaction found for series {series_id}")

        start = series_changes.get("start_date", series.start_date)
        end = series_changes["end_date"]
        if end is not None and end < start:
            raise ValidationError("End date must be after start date")

        if template_changes is not None:
            validate_required_accounts(
                template_changes.get("transaction_type", template.transaction_type),
                template_changes.get("from_account_id", template.from_account_id),
                template_changes.get("to_account_id", template.to_account_id),
            )

        recurrence_changed = any(
            field in series_changes and series_changes[field] != getattr(series, field)
            for field in RECURRENCE_FIELDS
        )

        repo.update_series(series, series_changes)

        updated_count = 0
        if template_changes is not None:
            repo.update_transaction(template, template_changes)
            if scope != "none":
                updated_count = repo.update_instances(
                    series_id,
                    template_changes,
                    date_from=today if scope == "future" else None,
                )

        regenerated: List[Transaction] = []
        if recurrence_changed:
            regenerated = _generate(repo, series, template, today, True, today)

    logger.info(
        f"Updated recurring series {series_id} (scope={scope}, updated={updated_count}, "
        f"regenerated={len(regenerated)})"
    )
    return SeriesUpdateResult(
        series=series,
        template=template if template_changes is not None else None,
        update_scope=scope,
        updated_count=updated_count,
        regenerated=regenerated,
    )


def delete_recurring_series(
    repo: RecurringRepository,
    series_id: str,
    keep_instances: bool = False
) -> SeriesDeleteResult:
    """
    Delete a series. With keep_instances the template goes away but the
    generated instances stay behind as standalone transactions.
    """
    with repo.atomic():
        series = repo.get_series(series_id)
        if not series:
            raise NotFoundError(f"No recurring series found with id {series_id}")

        if keep_instances:
            repo.delete_template(series_id)
            repo.unlink_instances(series_id)
        else:
            repo.delete_transactions_where(series_id, exclude_template=False)

        repo.delete_series(series)

    logger.info(f"Deleted recurring series {series_id} (keep_instances={keep_instances})")
    return SeriesDeleteResult(series_id=series_id, deleted=True, kept_instances=keep_instances)


# Reads

def list_series(repo: RecurringRepository) -> List[RecurringSeries]:
    """All series, newest first."""
    return repo.list_series()


def get_series_detail(repo: RecurringRepository, series_id: str) -> SeriesDetail:
    series = repo.get_series(series_id)
    if not series:
        raise NotFoundError(f"No recurring series found with id {series_id}")
    return SeriesDetail(
        series=series,
        template=repo.get_template(series_id),
        instances=repo.list_instances(series_id),
    )
