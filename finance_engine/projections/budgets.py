"""
Budget Comparator

Compares realized + pending spend against planned budget amounts.

DESIGN DECISION: No month windowing happens here.
The comparator evaluates whatever transaction set the caller passes;
restricting it to a month is the caller's job. Confirmed spend counts
regardless of date, exactly like the aggregator.
"""

from decimal import Decimal
from typing import Iterable, Optional

from finance_engine.audit import get_logger
from finance_engine.config import EngineSettings, get_settings
from finance_engine.models.finance import (
    Budget,
    Category,
    Transaction,
    TransactionKind,
)
from finance_engine.models.projection import BudgetAlert, BudgetStatus
from finance_engine.validation import active_transactions


logger = get_logger(__name__)


def _matches(t: Transaction, budget: Budget) -> bool:
    if t.kind != TransactionKind.EXPENSE:
        return False
    if t.category_id != budget.category_id:
        return False
    # A whole-category budget matches every subcategory
    if budget.subcategory_id is not None and t.subcategory_id != budget.subcategory_id:
        return False
    return True


def classify(percent_used: Decimal, settings: Optional[EngineSettings] = None) -> BudgetStatus:
    """Risk status for a usage percentage."""
    settings = settings or get_settings().engine
    if percent_used > settings.budget_over_percent:
        return BudgetStatus.OVER
    if percent_used >= settings.budget_warning_percent:
        return BudgetStatus.WARNING
    return BudgetStatus.OK


def compare_budgets(
    transactions: Iterable[Transaction],
    budgets: Iterable[Budget],
    categories: Iterable[Category],
    settings: Optional[EngineSettings] = None,
) -> list[BudgetAlert]:
    """
    Build alerts for budgets at or above the warning threshold.

    - Budgets with planned_amount == 0 are skipped
    - Budgets whose category is not in `categories` are skipped
    - Results are sorted by percent_used, highest first

    Returns an empty list when nothing is at risk.
    """
    settings = settings or get_settings().engine
    rows = active_transactions(transactions)
    categories_by_id = {c.id: c for c in categories}

    alerts: list[BudgetAlert] = []

    for budget in budgets:
        if budget.planned_amount == 0:
            continue

        category = categories_by_id.get(budget.category_id)
        if category is None:
            continue

        relevant = [t for t in rows if _matches(t, budget)]
        realized = sum((t.amount for t in relevant if t.is_confirmed), Decimal("0"))
        pending = sum((t.amount for t in relevant if t.is_planned), Decimal("0"))

        total = realized + pending
        percent_used = total / budget.planned_amount * 100

        status = classify(percent_used, settings)
        if status == BudgetStatus.OK:
            continue

        subcategory = category.find_subcategory(budget.subcategory_id)
        alerts.append(BudgetAlert(
            category_id=budget.category_id,
            category_name=category.name,
            subcategory_id=budget.subcategory_id,
            subcategory_name=subcategory.name if subcategory else None,
            budget_amount=budget.planned_amount,
            realized_amount=realized,
            pending_amount=pending,
            total_amount=total,
            percent_used=percent_used,
            status=status,
        ))

    alerts.sort(key=lambda a: a.percent_used, reverse=True)

    logger.debug(
        "budgets_compared",
        alert_count=len(alerts),
        over_count=sum(1 for a in alerts if a.status == BudgetStatus.OVER),
    )
    return alerts
