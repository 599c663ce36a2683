"""
Effective Date Resolution

The effective date decides which month a transaction belongs to:
- EXPENSE: due_date when present, else date (bills count when due)
- INCOME / TRANSFER: always date, due_date is ignored

Only year and month of a target month are significant; any day inside
the month identifies it.
"""

from calendar import monthrange
from datetime import date, datetime
from typing import Any

from finance_engine.errors import InvalidArgumentError
from finance_engine.models.finance import TransactionKind


def as_date(value: Any, field: str = "date") -> date:
    """
    Coerce a date-like value to a date.

    Accepts date, datetime and ISO "YYYY-MM-DD" strings (a time part is
    ignored). Anything else is a caller bug.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError as e:
            raise InvalidArgumentError(f"Unparseable date {value!r}", field=field) from e
    raise InvalidArgumentError(f"Expected a date, got {type(value).__name__}", field=field)


def effective_date(transaction: Any) -> date:
    """Date that governs which month a transaction is bucketed into."""
    if transaction.kind == TransactionKind.EXPENSE and transaction.due_date is not None:
        return as_date(transaction.due_date, field="due_date")
    return as_date(transaction.date)


def start_of_month(month: Any) -> date:
    return as_date(month, field="month").replace(day=1)


def end_of_month(month: Any) -> date:
    """Last calendar day of the month containing `month`."""
    first = start_of_month(month)
    return first.replace(day=monthrange(first.year, first.month)[1])


def is_in_month(transaction: Any, month: Any) -> bool:
    """True iff the effective date falls in the same year+month as `month`."""
    eff = effective_date(transaction)
    target = as_date(month, field="month")
    return (eff.year, eff.month) == (target.year, target.month)


def month_key(month: Any) -> str:
    """'YYYY-MM' key for logs and caches."""
    return start_of_month(month).strftime("%Y-%m")
