"""
Result Models for the Finance Engine

Everything here is DERIVED output: computed on demand from accounts and
transactions, handed to the UI/notification collaborators, never persisted.

All amounts are Decimal. All models are frozen so a result can be cached
by the caller and compared against a later run without defensive copies.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from finance_engine.models.finance import Account


ZERO = Decimal("0")


class BudgetStatus(str, Enum):
    """Risk classification of a budget."""
    OK = "ok"
    WARNING = "warning"
    OVER = "over"


# =============================================================================
# ACCOUNT PROJECTIONS
# =============================================================================

class PendingTransactionDetail(BaseModel):
    """A planned transaction reduced to what the projection drawer shows."""
    model_config = ConfigDict(frozen=True)

    id: str
    date: date
    due_date: Optional[date] = None
    description: Optional[str] = None
    category_name: Optional[str] = None
    subcategory_name: Optional[str] = None
    amount: Decimal


class AccountProjection(BaseModel):
    """
    Per-account figures for one target month.

    INVARIANT: projected_balance == realized_balance + pending_income - pending_expenses
    """
    model_config = ConfigDict(frozen=True)

    account: Account

    # Confirmed money, regardless of date
    realized_balance: Decimal = ZERO
    # Planned money with effective date up to the end of the target month
    pending_income: Decimal = ZERO
    pending_expenses: Decimal = ZERO
    projected_balance: Decimal = ZERO

    transaction_count: int = Field(
        default=0,
        ge=0,
        description="Confirmed legs contributing to realized_balance"
    )
    is_negative_projected: bool = False

    # Sorted by amount, largest first
    planned_incomes: list[PendingTransactionDetail] = Field(default_factory=list)
    planned_expenses: list[PendingTransactionDetail] = Field(default_factory=list)


class Totals(BaseModel):
    """
    Household-wide sums of AccountProjection figures.

    reserve_* covers is_reserve accounts, available_* covers the rest.
    For every figure: reserve_x + available_x == x.
    """
    model_config = ConfigDict(frozen=True)

    realized_balance: Decimal = ZERO
    projected_balance: Decimal = ZERO
    pending_income: Decimal = ZERO
    pending_expenses: Decimal = ZERO

    reserve_realized_balance: Decimal = ZERO
    reserve_projected_balance: Decimal = ZERO
    reserve_pending_income: Decimal = ZERO
    reserve_pending_expenses: Decimal = ZERO

    available_realized_balance: Decimal = ZERO
    available_projected_balance: Decimal = ZERO
    available_pending_income: Decimal = ZERO
    available_pending_expenses: Decimal = ZERO


class AvailableBalance(BaseModel):
    """
    Reserve-adjusted balance for a month.

    saldo_disponivel == base_balance - transfers_to_reserve + transfers_from_reserve
    """
    model_config = ConfigDict(frozen=True)

    saldo_disponivel: Decimal
    transfers_to_reserve: Decimal = ZERO
    transfers_from_reserve: Decimal = ZERO


# =============================================================================
# MONTH / LIFETIME SUMMARIES
# =============================================================================

class MonthlyMetrics(BaseModel):
    """Status split of the transactions whose effective date is in one month."""
    model_config = ConfigDict(frozen=True)

    income_realized: Decimal = ZERO
    expense_realized: Decimal = ZERO
    balance_realized: Decimal = ZERO

    income_pending: Decimal = ZERO
    expense_pending: Decimal = ZERO

    income_forecast: Decimal = ZERO
    expense_forecast: Decimal = ZERO
    balance_forecast: Decimal = ZERO

    confirmed_count: int = 0
    planned_income_count: int = 0
    planned_expense_count: int = 0
    total_count: int = 0


class TotalMetrics(BaseModel):
    """Lifetime confirmed income/expense. Transfers are internal and excluded."""
    model_config = ConfigDict(frozen=True)

    saldo_total: Decimal = ZERO
    total_income_confirmed: Decimal = ZERO
    total_expense_confirmed: Decimal = ZERO


# =============================================================================
# BUDGETS
# =============================================================================

class BudgetAlert(BaseModel):
    """A budget whose realized + pending spend crossed the warning threshold."""
    model_config = ConfigDict(frozen=True)

    category_id: str
    category_name: Optional[str] = None
    subcategory_id: Optional[str] = None
    subcategory_name: Optional[str] = None

    budget_amount: Decimal
    realized_amount: Decimal = ZERO
    pending_amount: Decimal = ZERO
    total_amount: Decimal = ZERO
    percent_used: Decimal = ZERO

    status: BudgetStatus = BudgetStatus.OK


# =============================================================================
# ENGINE RUN / SIMULATION
# =============================================================================

class EngineResult(BaseModel):
    """Everything one engine run produces for a target month."""
    model_config = ConfigDict(frozen=True)

    target_month: date
    projections: list[AccountProjection] = Field(default_factory=list)
    negative_projected_accounts: list[AccountProjection] = Field(default_factory=list)
    totals: Totals = Field(default_factory=Totals)

    budget_alerts: list[BudgetAlert] = Field(default_factory=list)
    over_budget_count: int = 0
    warning_count: int = 0


class SimulationComparison(BaseModel):
    """Before/after view of a simulation, computed from two engine runs."""
    model_config = ConfigDict(frozen=True)

    before_balance: Decimal
    after_balance: Decimal
    difference: Decimal

    before_pending_expenses: Decimal
    after_pending_expenses: Decimal
    expenses_difference: Decimal

    # difference >= negligible delta
    is_improvement: bool
    # abs(difference) < negligible delta
    is_negligible: bool


# =============================================================================
# RISK / FORECAST
# =============================================================================

class BalanceState(str, Enum):
    """Sign of the projected balance of a month."""
    NEGATIVE = "NEGATIVE"
    NON_NEGATIVE = "NON_NEGATIVE"


class BalanceTransition(str, Enum):
    """Change of BalanceState between two forecasts."""
    NEGATIVE_TO_POSITIVE = "NEGATIVE_TO_POSITIVE"
    POSITIVE_TO_NEGATIVE = "POSITIVE_TO_NEGATIVE"


class OverdueExpense(BaseModel):
    """A planned expense whose due date is already behind the reference date."""
    model_config = ConfigDict(frozen=True)

    id: str
    description: str
    days_overdue: int = Field(..., ge=1)
    amount: Decimal
    category_name: Optional[str] = None
    subcategory_name: Optional[str] = None


class CoverageRiskExpense(BaseModel):
    """A planned expense due within a week that the realized balance cannot cover."""
    model_config = ConfigDict(frozen=True)

    id: str
    description: str
    days_until_due: int = Field(..., ge=1)
    amount: Decimal
    category_name: Optional[str] = None
    subcategory_name: Optional[str] = None


class RiskAssessment(BaseModel):
    """
    Expense risks as of a reference date.

    coverage_risk_expenses is only evaluated when nothing is overdue and
    the projected balance is not already negative.
    """
    model_config = ConfigDict(frozen=True)

    overdue_expenses: list[OverdueExpense] = Field(default_factory=list)
    has_overdue_expenses: bool = False
    coverage_risk_expenses: list[CoverageRiskExpense] = Field(default_factory=list)
    has_coverage_risk: bool = False


class ForecastState(BaseModel):
    """Risk indicators of a month's projected balance as of a reference date."""
    model_config = ConfigDict(frozen=True)

    is_negative: bool
    # abs(projected balance) when negative, else 0
    risk_amount: Decimal = ZERO
    balance_state: BalanceState
    # Negative once the month is over
    days_until_month_end: int
    is_current_or_future_month: bool
    show_risk_preview: bool = False
