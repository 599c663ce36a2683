"""Validation package."""

from finance_engine.validation.validator import (
    TransactionValidator,
    active_transactions,
    validate_transaction,
)

__all__ = ["TransactionValidator", "active_transactions", "validate_transaction"]
