"""
Shared fixtures.

All dates are fixed: the engine never reads the clock, so neither do
the tests. The reference month is March 2025.
"""

from datetime import date
from decimal import Decimal

import pytest

from finance_engine.config import EngineSettings
from finance_engine.models import (
    Account,
    AccountType,
    Category,
    Subcategory,
    Transaction,
    TransactionKind,
    TransactionStatus,
)


MARCH = date(2025, 3, 1)
APRIL = date(2025, 4, 1)


def make_transaction(
    id: str = "t1",
    kind: TransactionKind = TransactionKind.EXPENSE,
    status: TransactionStatus = TransactionStatus.CONFIRMED,
    amount: str = "100",
    account_id: str = "checking",
    tx_date: date = date(2025, 3, 10),
    **fields,
) -> Transaction:
    return Transaction(
        id=id,
        kind=kind,
        status=status,
        amount=Decimal(amount),
        account_id=account_id,
        date=tx_date,
        **fields,
    )


@pytest.fixture
def make_tx():
    """Factory for transactions with sensible defaults."""
    return make_transaction


@pytest.fixture
def checking() -> Account:
    return Account(id="checking", name="Checking", type=AccountType.BANK, is_primary=True)


@pytest.fixture
def savings() -> Account:
    return Account(id="savings", name="Savings", type=AccountType.BANK, is_reserve=True)


@pytest.fixture
def wallet() -> Account:
    return Account(id="wallet", name="Wallet", type=AccountType.CASH)


@pytest.fixture
def accounts(checking, savings, wallet) -> list[Account]:
    return [checking, savings, wallet]


@pytest.fixture
def categories() -> list[Category]:
    return [
        Category(
            id="home",
            name="Home",
            subcategories=[
                Subcategory(id="rent", category_id="home", name="Rent"),
                Subcategory(id="power", category_id="home", name="Electricity"),
            ],
        ),
        Category(id="food", name="Food"),
        Category(id="salary", name="Salary"),
    ]


@pytest.fixture
def settings() -> EngineSettings:
    """Default thresholds, independent of the environment."""
    return EngineSettings(
        budget_warning_percent=Decimal("80"),
        budget_over_percent=Decimal("100"),
        min_installments=2,
        max_installments=12,
        negligible_delta=Decimal("0.01"),
        simulated_id_prefix="simulated",
    )
