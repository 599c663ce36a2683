"""Simulation package: in-memory "what if" overlays and sessions."""

from finance_engine.simulation.overlay import (
    add_simulated,
    cancel_simulated,
    is_simulated,
    remove_simulated,
    split_into_installments,
    update_simulated,
)
from finance_engine.simulation.session import (
    SessionState,
    SimulationSession,
    compare_results,
    is_negligible,
)

__all__ = [
    "SessionState",
    "SimulationSession",
    "add_simulated",
    "cancel_simulated",
    "compare_results",
    "is_negligible",
    "is_simulated",
    "remove_simulated",
    "split_into_installments",
    "update_simulated",
]
