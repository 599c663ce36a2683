"""
Simulation Overlay

"What if" variants of a transaction set, computed in memory.

CRITICAL: Every function here is pure with respect to its `base` argument.
- The base collection is never mutated (it may be a tuple; rows are frozen)
- The returned collection is always a NEW list
- Rows that are not touched are passed through by reference

Functions compose: the output of one is a valid `base` for the next.
Discarding a simulation is simply reusing the original collection.

KNOWN SIMPLIFICATION: installment amounts are original.amount / count in
full Decimal precision. No cent rounding is applied, so no remainder has to
be assigned to the first or last installment.
"""

from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional, Union
from uuid import uuid4

from dateutil.relativedelta import relativedelta
from pydantic import ValidationError

from finance_engine.config import EngineSettings, get_settings
from finance_engine.errors import InvalidArgumentError
from finance_engine.models.finance import (
    Transaction,
    TransactionDraft,
    TransactionKind,
    TransactionStatus,
)
from finance_engine.validation import validate_transaction


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _synthetic_id(*parts: str, settings: Optional[EngineSettings] = None) -> str:
    settings = settings or get_settings().engine
    return "-".join((settings.simulated_id_prefix,) + parts)


def is_simulated(transaction: Transaction, settings: Optional[EngineSettings] = None) -> bool:
    """True for rows created by this overlay rather than loaded from storage."""
    settings = settings or get_settings().engine
    return transaction.id.startswith(settings.simulated_id_prefix + "-")


def add_simulated(
    base: Iterable[Transaction],
    draft: Union[TransactionDraft, Mapping[str, Any]],
    now: Optional[datetime] = None,
    settings: Optional[EngineSettings] = None,
) -> list[Transaction]:
    """
    Append a synthetic transaction built from a minimal draft.

    confirmed_at is stamped only when the draft is confirmed.

    Raises:
        InvalidArgumentError: if the draft is malformed
    """
    rows = list(base)
    try:
        if not isinstance(draft, TransactionDraft):
            draft = TransactionDraft.model_validate(draft)
    except ValidationError as e:
        raise InvalidArgumentError(f"Invalid simulation draft: {e.error_count()} error(s)", field="draft") from e

    confirmed = draft.status == TransactionStatus.CONFIRMED
    transaction = Transaction(
        id=draft.id or _synthetic_id(uuid4().hex, settings=settings),
        household_id=rows[0].household_id if rows else None,
        account_id=draft.account_id,
        to_account_id=draft.to_account_id,
        category_id=draft.category_id,
        subcategory_id=draft.subcategory_id,
        kind=draft.kind,
        status=draft.status,
        amount=draft.amount,
        date=draft.date,
        due_date=draft.due_date,
        description=draft.description,
        confirmed_at=(now or _utcnow()) if confirmed else None,
    )
    rows.append(validate_transaction(transaction))
    return rows


def update_simulated(
    base: Iterable[Transaction],
    transaction_id: str,
    patch: Mapping[str, Any],
) -> list[Transaction]:
    """
    Shallow-merge `patch` into the row with `transaction_id`.

    The merged row is re-validated, so string dates in the patch are
    parsed like any other input. An unknown id leaves the set unchanged.

    Raises:
        InvalidArgumentError: on unknown fields or an invalid merged row
    """
    unknown = set(patch) - set(Transaction.model_fields)
    if unknown:
        raise InvalidArgumentError(
            f"Unknown transaction field(s): {', '.join(sorted(unknown))}",
            field="patch",
        )

    def merge(t: Transaction) -> Transaction:
        try:
            merged = Transaction.model_validate({**t.model_dump(), **patch})
        except ValidationError as e:
            raise InvalidArgumentError(
                f"Patch makes transaction {t.id} invalid: {e.error_count()} error(s)",
                field="patch",
            ) from e
        return validate_transaction(merged)

    return [merge(t) if t.id == transaction_id else t for t in base]


def remove_simulated(base: Iterable[Transaction], transaction_id: str) -> list[Transaction]:
    """Drop the row with `transaction_id`."""
    return [t for t in base if t.id != transaction_id]


def cancel_simulated(
    base: Iterable[Transaction],
    transaction_id: str,
    now: Optional[datetime] = None,
) -> list[Transaction]:
    """Mark the row with `transaction_id` as cancelled."""
    return update_simulated(
        base,
        transaction_id,
        {"status": TransactionStatus.CANCELLED, "cancelled_at": now or _utcnow()},
    )


def split_into_installments(
    base: Iterable[Transaction],
    original: Transaction,
    count: int,
    settings: Optional[EngineSettings] = None,
) -> list[Transaction]:
    """
    Replace an expense with `count` monthly planned installments.

    Installment i (1-based) is due i-1 calendar months after the original
    due date (falling back to its date). Month arithmetic clamps to the
    last day of shorter months (Jan 31 -> Feb 28/29 -> Mar 31).

    Raises:
        InvalidArgumentError: if count is outside the configured range
            or the original is not an EXPENSE
    """
    settings = settings or get_settings().engine

    if (
        isinstance(count, bool)
        or not isinstance(count, int)
        or not settings.min_installments <= count <= settings.max_installments
    ):
        raise InvalidArgumentError(
            f"Installment count must be between {settings.min_installments} "
            f"and {settings.max_installments}, got {count!r}",
            field="count",
        )
    if original.kind != TransactionKind.EXPENSE:
        raise InvalidArgumentError(
            f"Only expenses can be split, got {original.kind.value}",
            field="kind",
        )

    amount = original.amount / count
    group_id = _synthetic_id("installment", uuid4().hex, settings=settings)
    first_due = original.due_date or original.date
    label = original.description or "Expense"

    installments = [
        Transaction(
            id=f"{group_id}-{number}",
            household_id=original.household_id,
            account_id=original.account_id,
            category_id=original.category_id,
            subcategory_id=original.subcategory_id,
            kind=TransactionKind.EXPENSE,
            status=TransactionStatus.PLANNED,
            amount=amount,
            date=original.date,
            due_date=first_due + relativedelta(months=number - 1),
            description=f"{label} ({number}/{count})",
            installment_group_id=group_id,
            installment_number=number,
            installment_total=count,
        )
        for number in range(1, count + 1)
    ]

    return [t for t in base if t.id != original.id] + installments
