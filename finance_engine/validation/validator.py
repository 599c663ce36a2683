"""
Transaction Validation

DESIGN DECISION: The engine re-checks what it is about to fold.

Callers are expected to hand over well-formed, pre-filtered rows, but
a wrong balance is worse than a loud error. Two kinds of checks:

STRUCTURAL (raise InvalidArgumentError):
- TRANSFER must carry both account_id and to_account_id
- TRANSFER never carries category/subcategory
- INCOME/EXPENSE never carry to_account_id

LIVENESS (silently filter):
- status == cancelled or cancelled_at set -> row is dead

IMPORTANT: Validation NEVER silently fixes a malformed row.
"""

from typing import Iterable

from finance_engine.errors import InvalidArgumentError
from finance_engine.models.finance import Transaction, TransactionKind


class TransactionValidator:
    """Validates the structural invariants of transactions."""

    def validate(self, transaction: Transaction) -> Transaction:
        """
        Check one transaction.

        Returns the transaction unchanged.

        Raises:
            InvalidArgumentError: on the first broken invariant
        """
        if transaction.kind == TransactionKind.TRANSFER:
            self._validate_transfer(transaction)
        elif transaction.to_account_id is not None:
            raise InvalidArgumentError(
                f"{transaction.kind.value} transaction {transaction.id} "
                "cannot have a destination account",
                field="to_account_id",
            )
        return transaction

    def validate_all(self, transactions: Iterable[Transaction]) -> list[Transaction]:
        """Check every transaction and return them as a new list."""
        return [self.validate(t) for t in transactions]

    def _validate_transfer(self, transaction: Transaction) -> None:
        if not transaction.account_id or not transaction.to_account_id:
            raise InvalidArgumentError(
                f"Transfer {transaction.id} requires both account_id and to_account_id",
                field="to_account_id",
            )
        if transaction.account_id == transaction.to_account_id:
            raise InvalidArgumentError(
                f"Transfer {transaction.id} cannot move money into its own account",
                field="to_account_id",
            )
        if transaction.category_id is not None or transaction.subcategory_id is not None:
            raise InvalidArgumentError(
                f"Transfer {transaction.id} cannot carry a category",
                field="category_id",
            )


_validator = TransactionValidator()


def validate_transaction(transaction: Transaction) -> Transaction:
    """Module-level shortcut for TransactionValidator().validate."""
    return _validator.validate(transaction)


def active_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """
    Validate and drop dead rows.

    Every engine entry point runs its input through this, so cancelled
    rows never reach the arithmetic even if the caller forgot to filter.
    """
    return [t for t in _validator.validate_all(transactions) if not t.is_cancelled]
