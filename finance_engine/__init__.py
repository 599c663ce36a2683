"""
Finance Engine

The projection and simulation core of a household finance tracker.
Given accounts and transactions, it answers for any month:
how much money is in hand (realized), how much is still moving
(pending), and what the balance looks like once it settles (projected).

DESIGN PRINCIPLES:
1. Confirmed money counts regardless of date
2. Pending money is bounded by the end of the target month
3. No clock, no I/O, no shared state: same input, same output
4. Simulations never touch the real collection
5. Invalid input fails loudly; missing data degrades to zero
"""

__version__ = "1.0.0"
__author__ = "Finance Engine Team"

from finance_engine.errors import EngineError, InvalidArgumentError
from finance_engine.projections import (
    aggregate_accounts,
    available_balance,
    compare_budgets,
    compute_forecast,
    compute_monthly_metrics,
    compute_risk_assessment,
    compute_total_metrics,
    detect_balance_transition,
    effective_date,
    is_in_month,
    reduce_totals,
    run_engine,
)
from finance_engine.simulation import (
    SimulationSession,
    add_simulated,
    cancel_simulated,
    remove_simulated,
    split_into_installments,
    update_simulated,
)

__all__ = [
    "EngineError",
    "InvalidArgumentError",
    "SimulationSession",
    "add_simulated",
    "aggregate_accounts",
    "available_balance",
    "cancel_simulated",
    "compare_budgets",
    "compute_forecast",
    "compute_monthly_metrics",
    "compute_risk_assessment",
    "compute_total_metrics",
    "detect_balance_transition",
    "effective_date",
    "is_in_month",
    "reduce_totals",
    "remove_simulated",
    "run_engine",
    "split_into_installments",
    "update_simulated",
]
