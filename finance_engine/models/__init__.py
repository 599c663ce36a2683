"""
Data Models Package

This package contains all Pydantic models used by the finance engine.
Inputs (accounts, transactions, budgets, categories) and derived outputs
(projections, totals, alerts) must conform to these schemas.
"""

from finance_engine.models.finance import (
    Account,
    AccountType,
    Budget,
    Category,
    Subcategory,
    Transaction,
    TransactionDraft,
    TransactionKind,
    TransactionStatus,
)
from finance_engine.models.projection import (
    AccountProjection,
    AvailableBalance,
    BalanceState,
    BalanceTransition,
    BudgetAlert,
    BudgetStatus,
    CoverageRiskExpense,
    EngineResult,
    ForecastState,
    MonthlyMetrics,
    OverdueExpense,
    PendingTransactionDetail,
    RiskAssessment,
    SimulationComparison,
    TotalMetrics,
    Totals,
)
from finance_engine.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Input models
    "Account",
    "AccountType",
    "Budget",
    "Category",
    "Subcategory",
    "Transaction",
    "TransactionDraft",
    "TransactionKind",
    "TransactionStatus",
    # Derived models
    "AccountProjection",
    "AvailableBalance",
    "BalanceState",
    "BalanceTransition",
    "BudgetAlert",
    "BudgetStatus",
    "CoverageRiskExpense",
    "EngineResult",
    "ForecastState",
    "MonthlyMetrics",
    "OverdueExpense",
    "PendingTransactionDetail",
    "RiskAssessment",
    "SimulationComparison",
    "TotalMetrics",
    "Totals",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
