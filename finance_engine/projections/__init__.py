"""
Projection package.

Pure, clock-free computations that turn accounts and transactions into
per-account and household figures for a target month.
"""

from finance_engine.projections.aggregator import aggregate_accounts
from finance_engine.projections.budgets import classify, compare_budgets
from finance_engine.projections.dates import (
    as_date,
    effective_date,
    end_of_month,
    is_in_month,
    month_key,
    start_of_month,
)
from finance_engine.projections.engine import run_engine
from finance_engine.projections.risk import (
    compute_forecast,
    compute_risk_assessment,
    detect_balance_transition,
)
from finance_engine.projections.totals import (
    available_balance,
    compute_monthly_metrics,
    compute_total_metrics,
    reduce_totals,
)

__all__ = [
    "aggregate_accounts",
    "as_date",
    "available_balance",
    "classify",
    "compare_budgets",
    "compute_forecast",
    "compute_monthly_metrics",
    "compute_risk_assessment",
    "compute_total_metrics",
    "detect_balance_transition",
    "effective_date",
    "end_of_month",
    "is_in_month",
    "month_key",
    "reduce_totals",
    "run_engine",
    "start_of_month",
]
