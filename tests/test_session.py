"""
Tests for simulation sessions

Flow tests: edit -> preview -> apply/discard, plus the audit trail
left behind by each step.
"""

import warnings
import pytest
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import get_type_hints

from finance_engine.audit import AuditLogger
from finance_engine.config import EngineSettings
from finance_engine.errors import InvalidArgumentError
from finance_engine.models import AuditEvent, AuditEventType, AuditSeverity, TransactionKind, TransactionStatus
from finance_engine.simulation import SessionState, SimulationSession, is_negligible, is_simulated
from finance_engine.simulation import session as session_module

from conftest import MARCH


@pytest.fixture
def household(make_tx):
    return (
        make_tx(id="pay", kind=TransactionKind.INCOME, amount="1000"),
        make_tx(
            id="rent",
            status=TransactionStatus.PLANNED,
            amount="1500",
            description="Rent",
            due_date=date(2025, 3, 5),
        ),
    )


@pytest.fixture
def session(accounts, household, settings):
    return SimulationSession(accounts, household, MARCH, settings=settings, audit_logger=AuditLogger())


class TestStateMachine:
    """Tests for session state transitions."""

    def test_starts_idle_with_base_view(self, session, household):
        assert session.state == SessionState.IDLE
        assert session.overlay == household
        assert session.events == ()

    def test_edit_then_preview_then_apply(self, session, household):
        session.postpone(household[1], date(2025, 4, 10))
        assert session.state == SessionState.EDITING

        session.preview()
        assert session.state == SessionState.PREVIEWING

        rows = session.apply()
        assert session.state == SessionState.APPLIED
        assert [t.id for t in rows] == ["pay", "rent"]
        assert rows[1].due_date == date(2025, 4, 10)

    def test_edit_after_preview_composes(self, session, household):
        session.postpone(household[1], date(2025, 4, 10))
        session.preview()
        session.delete(household[0])
        assert session.state == SessionState.EDITING
        assert [t.id for t in session.overlay] == ["rent"]
        assert session.scenarios == ("postponement", "deletion")

    def test_apply_requires_preview(self, session, household):
        session.delete(household[0])
        with pytest.raises(InvalidArgumentError) as exc_info:
            session.apply()
        assert exc_info.value.field == "state"

    def test_preview_requires_an_edit(self, session):
        with pytest.raises(InvalidArgumentError):
            session.preview()

    def test_terminal_states_reject_everything(self, session, household):
        session.discard()
        assert session.state == SessionState.DISCARDED
        with pytest.raises(InvalidArgumentError):
            session.delete(household[0])
        with pytest.raises(InvalidArgumentError):
            session.discard()

    def test_discard_returns_base_verbatim(self, session, household):
        session.split(household[1], 3)
        assert session.discard() is household
        assert session.overlay == household


class TestScenarios:
    """Tests for the built-in what-if scenarios."""

    def test_postponing_a_bill_improves_the_month(self, session, household):
        session.postpone(household[1], date(2025, 4, 10))
        comparison = session.preview()

        assert comparison.before_balance == Decimal("-500")
        assert comparison.after_balance == Decimal("1000")
        assert comparison.difference == Decimal("1500")
        assert comparison.before_pending_expenses == Decimal("1500")
        assert comparison.after_pending_expenses == Decimal("0")
        assert comparison.expenses_difference == Decimal("-1500")
        assert comparison.is_improvement is True
        assert comparison.is_negligible is False

    def test_split_spreads_the_bill(self, session, household):
        session.split(household[1], 3)
        comparison = session.preview()
        assert comparison.after_pending_expenses == Decimal("500")
        assert comparison.difference == Decimal("1000")

    def test_adding_an_expense_worsens_the_month(self, session):
        session.add({
            "account_id": "checking",
            "kind": "EXPENSE",
            "amount": "250",
            "date": "2025-03-20",
            "status": "planned",
        })
        comparison = session.preview()
        assert comparison.difference == Decimal("-250")
        assert comparison.is_improvement is False

    def test_noop_edit_is_negligible(self, session):
        session.update("missing", {"amount": Decimal("1")})
        comparison = session.preview()
        assert comparison.difference == 0
        assert comparison.is_negligible is True
        assert comparison.is_improvement is False

    def test_real_run_ignores_the_overlay(self, session, household):
        session.delete(household[1])
        assert session.run(simulated=False).totals.pending_expenses == Decimal("1500")
        assert session.run().totals.pending_expenses == Decimal("0")

    def test_sessions_are_isolated(self, accounts, household, settings):
        first = SimulationSession(accounts, household, MARCH, settings=settings)
        second = SimulationSession(accounts, household, MARCH, settings=settings)
        first.delete(household[0])
        assert second.overlay == household
        assert first.session_id != second.session_id


class TestAuditTrail:
    """Tests for the events a session leaves behind."""

    def test_full_flow_events(self, session, household):
        session.postpone(household[1], date(2025, 4, 10))
        session.split(household[1], 2)
        session.preview()
        session.apply()

        types = [e.event_type for e in session.events]
        assert types == [
            AuditEventType.SIMULATION_STARTED,
            AuditEventType.SIMULATION_PREVIEWED,
            AuditEventType.SIMULATION_APPLIED,
        ]
        assert all(e.session_id == session.session_id for e in session.events)
        assert session.events[0].details["scenario"] == "postponement"
        assert session.events[0].details["transaction_id"] == "rent"

    def test_invalid_edit_is_logged_and_state_kept(self, session, household):
        with pytest.raises(InvalidArgumentError):
            session.split(household[1], 13)

        assert session.state == SessionState.IDLE
        assert session.overlay == household
        event = session.events[-1]
        assert event.event_type == AuditEventType.INVALID_ARGUMENT
        assert event.severity == AuditSeverity.WARNING
        assert event.details == {"field": "count"}

    def test_discard_event(self, session):
        session.discard()
        assert session.events[-1].event_type == AuditEventType.SIMULATION_DISCARDED


class TestNegligible:
    """Tests for the negligible-delta rule."""

    @pytest.mark.parametrize(
        "delta,expected",
        [("0", True), ("0.009", True), ("-0.009", True), ("0.01", False), ("-0.01", False), ("15", False)],
    )
    def test_is_negligible(self, settings, delta, expected):
        assert is_negligible(Decimal(delta), settings) is expected


class TestSessionSettings:
    """Tests for sessions built with custom settings."""

    def test_added_rows_use_session_prefix(self, accounts, household):
        custom = EngineSettings(simulated_id_prefix="sim")
        session = SimulationSession(accounts, household, MARCH, settings=custom)
        overlay = session.add({
            "account_id": "checking",
            "kind": "EXPENSE",
            "amount": "30",
            "date": "2025-03-20",
            "status": "planned",
        })
        added = overlay[-1]
        assert added.id.startswith("sim-")
        assert is_simulated(added, custom)

        overlay = session.split(household[1], 2)
        assert all(is_simulated(t, custom) for t in overlay[-2:])


class TestModuleSource:
    """Tests for the module source itself."""

    def test_compiles_without_escape_warnings(self):
        source = Path(session_module.__file__).read_text(encoding="utf-8")
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            compile(source, session_module.__file__, "exec")

    def test_events_property_is_annotated(self):
        hints = get_type_hints(SimulationSession.events.fget)
        assert hints["return"] == tuple[AuditEvent, ...]
