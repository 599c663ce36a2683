"""
Account Aggregator

Folds a transaction set into per-account figures for a target month.

RULES:
1. Confirmed rows move realized_balance REGARDLESS of their date.
   "Confirmed" means the money has moved or is committed.
2. Planned INCOME/EXPENSE rows are pending when their effective date is on
   or before the last day of the target month. Later ones belong to a
   future month and are excluded entirely.
3. Planned TRANSFERs count nowhere. Only confirmed transfers move money.
4. A transaction side pointing at an account that is not in `accounts`
   is silently ignored.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from finance_engine.audit import get_logger
from finance_engine.models.finance import (
    Account,
    Category,
    Transaction,
    TransactionKind,
)
from finance_engine.models.projection import (
    AccountProjection,
    PendingTransactionDetail,
)
from finance_engine.projections.dates import effective_date, end_of_month, month_key
from finance_engine.validation import active_transactions


logger = get_logger(__name__)


@dataclass
class _Accumulator:
    """Mutable running figures for one account during a single fold."""
    realized_balance: Decimal = Decimal("0")
    pending_income: Decimal = Decimal("0")
    pending_expenses: Decimal = Decimal("0")
    transaction_count: int = 0
    planned_incomes: list[PendingTransactionDetail] = field(default_factory=list)
    planned_expenses: list[PendingTransactionDetail] = field(default_factory=list)

    def to_projection(self, account: Account) -> AccountProjection:
        projected = self.realized_balance + self.pending_income - self.pending_expenses
        return AccountProjection(
            account=account,
            realized_balance=self.realized_balance,
            pending_income=self.pending_income,
            pending_expenses=self.pending_expenses,
            projected_balance=projected,
            transaction_count=self.transaction_count,
            is_negative_projected=projected < 0,
            # sorted() is stable, so ties keep their scan order
            planned_incomes=sorted(self.planned_incomes, key=lambda d: d.amount, reverse=True),
            planned_expenses=sorted(self.planned_expenses, key=lambda d: d.amount, reverse=True),
        )


class _CategoryNames:
    """Resolves category/subcategory ids to display names."""

    def __init__(self, categories: Iterable[Category]):
        self._categories = {c.id: c for c in categories}

    def category(self, category_id: Optional[str]) -> Optional[str]:
        category = self._categories.get(category_id) if category_id else None
        return category.name if category else None

    def subcategory(self, category_id: Optional[str], subcategory_id: Optional[str]) -> Optional[str]:
        category = self._categories.get(category_id) if category_id else None
        if category is None:
            return None
        subcategory = category.find_subcategory(subcategory_id)
        return subcategory.name if subcategory else None


def _detail(t: Transaction, names: _CategoryNames) -> PendingTransactionDetail:
    return PendingTransactionDetail(
        id=t.id,
        date=t.date,
        due_date=t.due_date,
        description=t.description,
        category_name=names.category(t.category_id),
        subcategory_name=names.subcategory(t.category_id, t.subcategory_id),
        amount=t.amount,
    )


def aggregate_accounts(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    target_month: date,
    categories: Iterable[Category] = (),
) -> list[AccountProjection]:
    """
    Compute one AccountProjection per input account, input order preserved.

    Args:
        accounts: Accounts in scope (zero accounts -> empty result)
        transactions: Any transaction set; cancelled rows are re-filtered
        target_month: Any date inside the month of interest
        categories: Optional, only used to name pending detail rows

    Raises:
        InvalidArgumentError: if a transaction is structurally invalid
    """
    accounts = list(accounts)
    rows = active_transactions(transactions)
    cutoff = end_of_month(target_month)
    names = _CategoryNames(categories)

    figures: dict[str, _Accumulator] = {a.id: _Accumulator() for a in accounts}

    for t in rows:
        source = figures.get(t.account_id)

        if t.is_confirmed:
            if t.kind == TransactionKind.INCOME and source is not None:
                source.realized_balance += t.amount
                source.transaction_count += 1
            elif t.kind == TransactionKind.EXPENSE and source is not None:
                source.realized_balance -= t.amount
                source.transaction_count += 1
            elif t.kind == TransactionKind.TRANSFER:
                if source is not None:
                    source.realized_balance -= t.amount
                    source.transaction_count += 1
                destination = figures.get(t.to_account_id)
                if destination is not None:
                    destination.realized_balance += t.amount
                    destination.transaction_count += 1

        elif t.is_planned and source is not None and effective_date(t) <= cutoff:
            if t.kind == TransactionKind.INCOME:
                source.pending_income += t.amount
                source.planned_incomes.append(_detail(t, names))
            elif t.kind == TransactionKind.EXPENSE:
                source.pending_expenses += t.amount
                source.planned_expenses.append(_detail(t, names))

    projections = [figures[a.id].to_projection(a) for a in accounts]

    logger.debug(
        "accounts_aggregated",
        month=month_key(target_month),
        account_count=len(accounts),
        transaction_count=len(rows),
        negative_count=sum(1 for p in projections if p.is_negative_projected),
    )
    return projections
