"""
Tests for the Finance Engine models

Test strategy:
1. Unit tests for individual components (models, resolvers, reducers)
2. Flow tests for simulation sessions
3. No clock and no I/O in tests (fixed dates everywhere)
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from finance_engine.models import (
    Account,
    AccountType,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    Budget,
    Category,
    Subcategory,
    Transaction,
    TransactionDraft,
    TransactionKind,
    TransactionStatus,
)


class TestAccountModel:
    """Tests for Account."""

    def test_account_defaults(self):
        """Test that flags and stored balances have safe defaults."""
        account = Account(id="a1", name="  Checking  ")
        assert account.name == "Checking"
        assert account.type == AccountType.BANK
        assert account.is_active is True
        assert account.is_reserve is False
        assert account.is_primary is False
        assert account.current_balance == Decimal("0")

    def test_account_is_frozen(self):
        """Test that accounts cannot be mutated in place."""
        account = Account(id="a1", name="Checking")
        with pytest.raises(ValidationError):
            account.is_reserve = True


class TestTransactionModel:
    """Tests for Transaction."""

    def test_transaction_coerces_amount_and_dates(self):
        """Test string inputs become Decimal and date."""
        tx = Transaction(
            id="t1",
            account_id="a1",
            kind="EXPENSE",
            status="planned",
            amount="19.90",
            date="2025-03-10",
            due_date="2025-03-15",
        )
        assert tx.amount == Decimal("19.90")
        assert tx.date == date(2025, 3, 10)
        assert tx.due_date == date(2025, 3, 15)
        assert tx.kind == TransactionKind.EXPENSE
        assert tx.status == TransactionStatus.PLANNED

    @pytest.mark.parametrize("amount", ["0", "-5"])
    def test_transaction_rejects_non_positive_amount(self, amount):
        """Test that amounts must be positive."""
        with pytest.raises(ValidationError):
            Transaction(
                id="t1",
                account_id="a1",
                kind=TransactionKind.INCOME,
                status=TransactionStatus.CONFIRMED,
                amount=Decimal(amount),
                date=date(2025, 3, 1),
            )

    def test_transaction_rejects_unparseable_date(self):
        """Test that a garbage date never reaches the engine."""
        with pytest.raises(ValidationError):
            Transaction(
                id="t1",
                account_id="a1",
                kind=TransactionKind.INCOME,
                status=TransactionStatus.CONFIRMED,
                amount=Decimal("1"),
                date="not-a-date",
            )

    def test_transaction_is_frozen(self, make_tx):
        """Test that transactions cannot be mutated in place."""
        tx = make_tx()
        with pytest.raises(ValidationError):
            tx.amount = Decimal("1")

    def test_cancelled_by_status(self, make_tx):
        tx = make_tx(status=TransactionStatus.CANCELLED)
        assert tx.is_cancelled is True
        assert tx.is_confirmed is False
        assert tx.is_planned is False

    def test_cancelled_by_timestamp(self, make_tx):
        """Test that a cancellation stamp kills a row whatever its status."""
        tx = make_tx(
            status=TransactionStatus.CONFIRMED,
            cancelled_at=datetime(2025, 3, 2, tzinfo=timezone.utc),
        )
        assert tx.is_cancelled is True
        assert tx.is_confirmed is False

    def test_live_statuses(self, make_tx):
        assert make_tx(status=TransactionStatus.CONFIRMED).is_confirmed is True
        assert make_tx(status=TransactionStatus.PLANNED).is_planned is True


class TestDraftModel:
    """Tests for TransactionDraft."""

    def test_draft_minimal(self):
        draft = TransactionDraft(
            account_id="a1",
            kind=TransactionKind.EXPENSE,
            amount=Decimal("50"),
            date=date(2025, 3, 5),
            status=TransactionStatus.PLANNED,
        )
        assert draft.due_date is None
        assert draft.category_id is None
        assert draft.id is None

    def test_draft_rejects_cancelled(self):
        """Test that only live statuses can be simulated."""
        with pytest.raises(ValidationError, match="planned or confirmed"):
            TransactionDraft(
                account_id="a1",
                kind=TransactionKind.EXPENSE,
                amount=Decimal("50"),
                date=date(2025, 3, 5),
                status=TransactionStatus.CANCELLED,
            )


class TestCategoryAndBudget:
    """Tests for Category and Budget."""

    def test_find_subcategory(self):
        category = Category(
            id="home",
            name="Home",
            subcategories=[Subcategory(id="rent", category_id="home", name="Rent")],
        )
        assert category.find_subcategory("rent").name == "Rent"
        assert category.find_subcategory("missing") is None
        assert category.find_subcategory(None) is None

    def test_budget_whole_category(self):
        budget = Budget(category_id="home", planned_amount="1500")
        assert budget.subcategory_id is None
        assert budget.planned_amount == Decimal("1500")

    def test_budget_month_scope_is_implicit(self):
        """Test caller bookkeeping like year/month is not carried on the model."""
        budget = Budget(category_id="home", planned_amount="100", year=2025, month=3)
        assert set(Budget.model_fields) == {"id", "category_id", "subcategory_id", "planned_amount"}
        assert not hasattr(budget, "year")

    def test_budget_rejects_negative_amount(self):
        with pytest.raises(ValidationError):
            Budget(category_id="home", planned_amount=Decimal("-1"))


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.SIMULATION_DISCARDED,
            description="Simulation discarded",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        session_id = uuid4()
        event = AuditEventBuilder.simulation_started(session_id, "postponement", "t1")
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "simulation_started"
        assert log_dict["session_id"] == str(session_id)
        assert log_dict["details"]["transaction_id"] == "t1"

    def test_audit_event_builder_invalid_argument(self):
        """Test AuditEventBuilder.invalid_argument is a warning."""
        event = AuditEventBuilder.invalid_argument(None, "count", "bad count")
        assert event.event_type == AuditEventType.INVALID_ARGUMENT
        assert event.severity == AuditSeverity.WARNING
        assert event.details == {"field": "count"}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
