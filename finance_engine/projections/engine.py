"""
Engine Run

One call that takes a household snapshot through the whole pipeline:

    transactions (or a simulation override)
        -> aggregate_accounts -> reduce_totals -> compare_budgets
        -> EngineResult

DESIGN DECISION: The run is deterministic and clock-free.
target_month is an explicit parameter; running twice on the same input
gives equal results, which is what makes before/after simulation
comparisons meaningful.
"""

from datetime import date
from typing import Iterable, Optional

from finance_engine.audit import get_logger
from finance_engine.config import EngineSettings
from finance_engine.models.finance import Account, Budget, Category, Transaction
from finance_engine.models.projection import BudgetStatus, EngineResult
from finance_engine.projections.aggregator import aggregate_accounts
from finance_engine.projections.budgets import compare_budgets
from finance_engine.projections.dates import as_date, month_key
from finance_engine.projections.totals import reduce_totals


logger = get_logger(__name__)


def run_engine(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    target_month: date,
    budgets: Iterable[Budget] = (),
    categories: Iterable[Category] = (),
    override: Optional[Iterable[Transaction]] = None,
    settings: Optional[EngineSettings] = None,
) -> EngineResult:
    """
    Compute projections, totals and budget alerts for a target month.

    Args:
        accounts: Household accounts; inactive ones are left out
        transactions: The real transaction set
        target_month: Any date inside the month of interest
        budgets: Budgets of the month (optional)
        categories: Categories for names and budget lookup (optional)
        override: A simulation overlay to use instead of `transactions`

    An empty household (no accounts, no transactions) is a normal state
    and yields an all-zero result.
    """
    active_accounts = [a for a in accounts if a.is_active]
    categories = list(categories)
    rows = list(override if override is not None else transactions)

    projections = aggregate_accounts(active_accounts, rows, target_month, categories)
    totals = reduce_totals(projections)
    alerts = compare_budgets(rows, budgets, categories, settings)

    result = EngineResult(
        target_month=as_date(target_month, field="target_month"),
        projections=projections,
        negative_projected_accounts=[p for p in projections if p.is_negative_projected],
        totals=totals,
        budget_alerts=alerts,
        over_budget_count=sum(1 for a in alerts if a.status == BudgetStatus.OVER),
        warning_count=sum(1 for a in alerts if a.status == BudgetStatus.WARNING),
    )

    logger.debug(
        "engine_run",
        month=month_key(target_month),
        simulated=override is not None,
        account_count=len(projections),
        negative_count=len(result.negative_projected_accounts),
        alert_count=len(alerts),
    )
    return result
