"""
Risk and Forecast

Warnings derived from a month's figures and the planned expenses,
as of an explicit reference date.

DESIGN DECISION: reference_date is a required parameter.
"Today" belongs to the caller (the device clock of the user), never to
the engine, so the same inputs always give the same warnings.

COVERAGE RISK is a secondary warning: it is only evaluated when no
expense is overdue and the projected balance is not already negative.
Otherwise the stronger warning is already showing.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from finance_engine.audit import get_logger
from finance_engine.models.finance import Category, Transaction, TransactionKind
from finance_engine.models.projection import (
    BalanceState,
    BalanceTransition,
    CoverageRiskExpense,
    ForecastState,
    OverdueExpense,
    RiskAssessment,
)
from finance_engine.projections.aggregator import _CategoryNames
from finance_engine.projections.dates import (
    as_date,
    effective_date,
    end_of_month,
    month_key,
    start_of_month,
)
from finance_engine.validation import active_transactions


logger = get_logger(__name__)

COVERAGE_WINDOW_DAYS = (1, 7)
MIN_PREVIEW_DAYS = 5
DEFAULT_DESCRIPTION = "Expense"


def compute_risk_assessment(
    transactions: Iterable[Transaction],
    realized_balance: Decimal,
    projected_balance: Decimal,
    reference_date: date,
    categories: Iterable[Category] = (),
) -> RiskAssessment:
    """
    Overdue and coverage-risk planned expenses.

    - Overdue: due (effective) date strictly before reference_date
    - Coverage risk: due in 1..7 days and amount > realized_balance

    Rows keep their input order.
    """
    today = as_date(reference_date, field="reference_date")
    names = _CategoryNames(categories)
    planned = [
        t for t in active_transactions(transactions)
        if t.is_planned and t.kind == TransactionKind.EXPENSE
    ]

    overdue = [
        OverdueExpense(
            id=t.id,
            description=t.description or DEFAULT_DESCRIPTION,
            days_overdue=(today - effective_date(t)).days,
            amount=t.amount,
            category_name=names.category(t.category_id),
            subcategory_name=names.subcategory(t.category_id, t.subcategory_id),
        )
        for t in planned
        if effective_date(t) < today
    ]

    coverage: list[CoverageRiskExpense] = []
    if not overdue and projected_balance >= 0:
        first, last = COVERAGE_WINDOW_DAYS
        for t in planned:
            days_until_due = (effective_date(t) - today).days
            if not first <= days_until_due <= last:
                continue
            if t.amount <= realized_balance:
                continue
            coverage.append(CoverageRiskExpense(
                id=t.id,
                description=t.description or DEFAULT_DESCRIPTION,
                days_until_due=days_until_due,
                amount=t.amount,
                category_name=names.category(t.category_id),
                subcategory_name=names.subcategory(t.category_id, t.subcategory_id),
            ))

    logger.debug(
        "risk_assessed",
        reference_date=today.isoformat(),
        overdue_count=len(overdue),
        coverage_risk_count=len(coverage),
    )
    return RiskAssessment(
        overdue_expenses=overdue,
        has_overdue_expenses=bool(overdue),
        coverage_risk_expenses=coverage,
        has_coverage_risk=bool(coverage),
    )


def compute_forecast(
    projected_balance: Decimal,
    pending_expenses: Decimal,
    month: date,
    reference_date: date,
) -> ForecastState:
    """
    Balance state of a month and whether to show the risk preview.

    The preview shows when the month is negative, still has pending
    expenses, and at least 5 days remain before it ends.
    """
    today = as_date(reference_date, field="reference_date")
    month_start = start_of_month(month)
    month_end = end_of_month(month)

    is_negative = projected_balance < 0
    days_until_month_end = (month_end - today).days
    # Current or future month: the month has not ended yet
    not_ended = today <= month_end

    forecast = ForecastState(
        is_negative=is_negative,
        risk_amount=abs(projected_balance) if is_negative else Decimal("0"),
        balance_state=BalanceState.NEGATIVE if is_negative else BalanceState.NON_NEGATIVE,
        days_until_month_end=days_until_month_end,
        is_current_or_future_month=not_ended,
        show_risk_preview=(
            is_negative
            and pending_expenses > 0
            and not_ended
            and days_until_month_end >= MIN_PREVIEW_DAYS
        ),
    )

    logger.debug(
        "forecast_computed",
        month=month_key(month_start),
        balance_state=forecast.balance_state.value,
        show_risk_preview=forecast.show_risk_preview,
        days_until_month_end=days_until_month_end,
    )
    return forecast


def detect_balance_transition(
    previous: Optional[BalanceState],
    current: BalanceState,
) -> Optional[BalanceTransition]:
    """Sign change between two forecasts; None without a previous state."""
    if previous is None or previous == current:
        return None

    if previous == BalanceState.NEGATIVE:
        transition = BalanceTransition.NEGATIVE_TO_POSITIVE
    else:
        transition = BalanceTransition.POSITIVE_TO_NEGATIVE

    logger.info("balance_transition", transition=transition.value)
    return transition
