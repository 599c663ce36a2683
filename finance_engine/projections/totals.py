"""
Totals Reducer

Household-level figures built on top of the per-account projections,
plus the month/lifetime summaries shown on the dashboard cards.

RESERVE ACCOUNTS: moving money into a reserve account reduces what is
"available to spend" even though the household's realized balance does
not change. available_balance() answers that question from the transfer
legs alone, independently of the aggregator.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable

from finance_engine.models.finance import Account, Transaction, TransactionKind
from finance_engine.models.projection import (
    AccountProjection,
    AvailableBalance,
    MonthlyMetrics,
    TotalMetrics,
    Totals,
)
from finance_engine.projections.dates import is_in_month
from finance_engine.validation import active_transactions


_FIGURES = ("realized_balance", "projected_balance", "pending_income", "pending_expenses")


def reduce_totals(projections: Iterable[AccountProjection]) -> Totals:
    """Element-wise sum of every projection; empty input gives all zeros."""
    sums: dict[str, Decimal] = {}
    for prefix in ("", "reserve_", "available_"):
        for name in _FIGURES:
            sums[prefix + name] = Decimal("0")

    for p in projections:
        bucket = "reserve_" if p.account.is_reserve else "available_"
        for name in _FIGURES:
            value = getattr(p, name)
            sums[name] += value
            sums[bucket + name] += value

    return Totals(**sums)


def available_balance(
    transactions: Iterable[Transaction],
    accounts: Iterable[Account],
    base_balance: Decimal,
    month: date,
) -> AvailableBalance:
    """
    Reserve-adjusted balance for a month.

    Only confirmed TRANSFERs whose effective date is in `month` count:
    - normal -> reserve: transfers_to_reserve
    - reserve -> normal: transfers_from_reserve
    - same reserve status on both ends: no effect
    Transfers touching an unknown account are skipped.

    A float base_balance is taken by its decimal repr (0.1, not its
    binary expansion).
    """
    by_id = {a.id: a for a in accounts}

    to_reserve = Decimal("0")
    from_reserve = Decimal("0")

    for t in active_transactions(transactions):
        if t.kind != TransactionKind.TRANSFER or not t.is_confirmed:
            continue
        if not is_in_month(t, month):
            continue

        source = by_id.get(t.account_id)
        destination = by_id.get(t.to_account_id)
        if source is None or destination is None:
            continue

        if not source.is_reserve and destination.is_reserve:
            to_reserve += t.amount
        elif source.is_reserve and not destination.is_reserve:
            from_reserve += t.amount

    return AvailableBalance(
        saldo_disponivel=Decimal(str(base_balance)) - to_reserve + from_reserve,
        transfers_to_reserve=to_reserve,
        transfers_from_reserve=from_reserve,
    )


def compute_monthly_metrics(
    transactions: Iterable[Transaction],
    month: date,
) -> MonthlyMetrics:
    """
    Status split of the transactions whose effective date is in `month`.

    Realized = confirmed, pending = planned. Transfers only show up in
    the counts.
    """
    in_month = [t for t in active_transactions(transactions) if is_in_month(t, month)]
    confirmed = [t for t in in_month if t.is_confirmed]
    planned = [t for t in in_month if t.is_planned]

    def total(rows: list[Transaction], kind: TransactionKind) -> Decimal:
        return sum((t.amount for t in rows if t.kind == kind), Decimal("0"))

    income_realized = total(confirmed, TransactionKind.INCOME)
    expense_realized = total(confirmed, TransactionKind.EXPENSE)
    income_pending = total(planned, TransactionKind.INCOME)
    expense_pending = total(planned, TransactionKind.EXPENSE)

    income_forecast = income_realized + income_pending
    expense_forecast = expense_realized + expense_pending

    return MonthlyMetrics(
        income_realized=income_realized,
        expense_realized=expense_realized,
        balance_realized=income_realized - expense_realized,
        income_pending=income_pending,
        expense_pending=expense_pending,
        income_forecast=income_forecast,
        expense_forecast=expense_forecast,
        balance_forecast=income_forecast - expense_forecast,
        confirmed_count=len(confirmed),
        planned_income_count=sum(1 for t in planned if t.kind == TransactionKind.INCOME),
        planned_expense_count=sum(1 for t in planned if t.kind == TransactionKind.EXPENSE),
        total_count=len(in_month),
    )


def compute_total_metrics(transactions: Iterable[Transaction]) -> TotalMetrics:
    """Lifetime confirmed income minus confirmed expense, across all dates."""
    income = Decimal("0")
    expense = Decimal("0")
    for t in active_transactions(transactions):
        if not t.is_confirmed:
            continue
        if t.kind == TransactionKind.INCOME:
            income += t.amount
        elif t.kind == TransactionKind.EXPENSE:
            expense += t.amount

    return TotalMetrics(
        saldo_total=income - expense,
        total_income_confirmed=income,
        total_expense_confirmed=expense,
    )
