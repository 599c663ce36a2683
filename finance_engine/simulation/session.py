"""
Simulation Session

An explicit, short-lived context object for one "what if" exploration.

State machine:

    idle -> editing -> previewing -> applied
                 ^         |
                 |         +-------> discarded
                 +---------+
    (editing again from previewing composes on top of the current overlay;
     discard is possible from any non-terminal state)

DESIGN DECISION: Scope travels in the session object, never in ambient
state. Two sessions over the same base never see each other's edits,
and "applied" only HANDS the overlay to the caller, which performs the
real persistence call outside the engine.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Union

from finance_engine.audit import AuditLogger, create_session_id
from finance_engine.config import EngineSettings, get_settings
from finance_engine.errors import InvalidArgumentError
from finance_engine.models.audit import AuditEvent, AuditEventBuilder
from finance_engine.models.finance import (
    Account,
    Budget,
    Category,
    Transaction,
    TransactionDraft,
)
from finance_engine.models.projection import EngineResult, SimulationComparison
from finance_engine.projections import run_engine
from finance_engine.simulation.overlay import (
    add_simulated,
    cancel_simulated,
    remove_simulated,
    split_into_installments,
    update_simulated,
)


Transform = Callable[[list[Transaction]], list[Transaction]]


class SessionState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"
    PREVIEWING = "previewing"
    APPLIED = "applied"
    DISCARDED = "discarded"


def is_negligible(delta: Decimal, settings: Optional[EngineSettings] = None) -> bool:
    """True when a money delta is below currency-cent granularity."""
    settings = settings or get_settings().engine
    return abs(delta) < settings.negligible_delta


def compare_results(
    before: EngineResult,
    after: EngineResult,
    settings: Optional[EngineSettings] = None,
) -> SimulationComparison:
    """Before/after comparison of two engine runs over the same accounts."""
    settings = settings or get_settings().engine
    difference = after.totals.projected_balance - before.totals.projected_balance
    return SimulationComparison(
        before_balance=before.totals.projected_balance,
        after_balance=after.totals.projected_balance,
        difference=difference,
        before_pending_expenses=before.totals.pending_expenses,
        after_pending_expenses=after.totals.pending_expenses,
        expenses_difference=after.totals.pending_expenses - before.totals.pending_expenses,
        is_improvement=difference >= settings.negligible_delta,
        is_negligible=is_negligible(difference, settings),
    )


class SimulationSession:
    """
    One simulation over a fixed household snapshot.

    Usage:
        session = SimulationSession(accounts, transactions, date(2025, 3, 1))
        session.postpone(rent, date(2025, 4, 10))
        comparison = session.preview()
        rows = session.apply()      # or session.discard()
    """

    def __init__(
        self,
        accounts: Iterable[Account],
        transactions: Sequence[Transaction],
        target_month: date,
        budgets: Iterable[Budget] = (),
        categories: Iterable[Category] = (),
        settings: Optional[EngineSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._accounts = list(accounts)
        self._base = transactions
        self._target_month = target_month
        self._budgets = list(budgets)
        self._categories = list(categories)
        self._settings = settings or get_settings().engine
        self._audit = audit_logger or AuditLogger()

        self.session_id = create_session_id()
        self._state = SessionState.IDLE
        self._overlay: list[Transaction] = list(transactions)
        self._scenarios: list[str] = []

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def overlay(self) -> tuple[Transaction, ...]:
        """Current simulated view (the base itself while idle)."""
        return tuple(self._overlay)

    @property
    def scenarios(self) -> tuple[str, ...]:
        """Names of the edits applied so far, in order."""
        return tuple(self._scenarios)

    @property
    def events(self) -> tuple[AuditEvent, ...]:
        return self._audit.events

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def edit(
        self,
        transform: Transform,
        scenario: str = "custom",
        transaction_id: Optional[str] = None,
    ) -> tuple[Transaction, ...]:
        """
        Apply an overlay function to the current simulated view.

        `transform` receives a fresh list and must return the new view.
        """
        self._require(SessionState.IDLE, SessionState.EDITING, SessionState.PREVIEWING)
        try:
            overlay = transform(list(self._overlay))
        except InvalidArgumentError as e:
            self._audit.log(AuditEventBuilder.invalid_argument(self.session_id, e.field, e.message))
            raise

        if self._state == SessionState.IDLE:
            self._audit.log(AuditEventBuilder.simulation_started(self.session_id, scenario, transaction_id))

        self._overlay = list(overlay)
        self._scenarios.append(scenario)
        self._state = SessionState.EDITING
        return self.overlay

    def postpone(self, transaction: Transaction, new_due_date: date) -> tuple[Transaction, ...]:
        """What if this bill were due later (or earlier)?"""
        return self.edit(
            lambda rows: update_simulated(rows, transaction.id, {"due_date": new_due_date}),
            scenario="postponement",
            transaction_id=transaction.id,
        )

    def split(self, transaction: Transaction, count: int) -> tuple[Transaction, ...]:
        """What if this expense were paid in `count` installments?"""
        return self.edit(
            lambda rows: split_into_installments(rows, transaction, count, self._settings),
            scenario="installment",
            transaction_id=transaction.id,
        )

    def delete(self, transaction: Transaction) -> tuple[Transaction, ...]:
        """What if this transaction did not exist?"""
        return self.edit(
            lambda rows: remove_simulated(rows, transaction.id),
            scenario="deletion",
            transaction_id=transaction.id,
        )

    def cancel(self, transaction: Transaction, now: Optional[datetime] = None) -> tuple[Transaction, ...]:
        return self.edit(
            lambda rows: cancel_simulated(rows, transaction.id, now),
            scenario="cancellation",
            transaction_id=transaction.id,
        )

    def add(
        self,
        draft: Union[TransactionDraft, Mapping[str, Any]],
        now: Optional[datetime] = None,
    ) -> tuple[Transaction, ...]:
        """What if this transaction happened too?"""
        return self.edit(
            lambda rows: add_simulated(rows, draft, now, self._settings),
            scenario="addition",
        )

    def update(self, transaction_id: str, patch: Mapping[str, Any]) -> tuple[Transaction, ...]:
        return self.edit(
            lambda rows: update_simulated(rows, transaction_id, patch),
            scenario="update",
            transaction_id=transaction_id,
        )

    # ------------------------------------------------------------------
    # Preview and resolution
    # ------------------------------------------------------------------

    def run(self, simulated: bool = True) -> EngineResult:
        """Engine result for the simulated view (or the real one)."""
        return run_engine(
            self._accounts,
            self._base,
            self._target_month,
            budgets=self._budgets,
            categories=self._categories,
            override=self._overlay if simulated else None,
            settings=self._settings,
        )

    def preview(self) -> SimulationComparison:
        """Compare the real and simulated views for the target month."""
        self._require(SessionState.EDITING, SessionState.PREVIEWING)
        comparison = compare_results(self.run(simulated=False), self.run(), self._settings)
        self._state = SessionState.PREVIEWING
        self._audit.log(AuditEventBuilder.simulation_previewed(
            self.session_id,
            str(comparison.difference),
            comparison.is_improvement,
        ))
        return comparison

    def apply(self) -> list[Transaction]:
        """
        Hand the overlay over for persistence.

        Only a previewed simulation can be applied.
        """
        self._require(SessionState.PREVIEWING)
        self._state = SessionState.APPLIED
        self._audit.log(AuditEventBuilder.simulation_applied(self.session_id, len(self._overlay)))
        return list(self._overlay)

    def discard(self) -> Sequence[Transaction]:
        """Drop the overlay and return the original collection verbatim."""
        self._require(SessionState.IDLE, SessionState.EDITING, SessionState.PREVIEWING)
        self._state = SessionState.DISCARDED
        self._overlay = list(self._base)
        self._audit.log(AuditEventBuilder.simulation_discarded(self.session_id))
        return self._base

    def _require(self, *allowed: SessionState) -> None:
        if self._state not in allowed:
            raise InvalidArgumentError(
                f"Operation not allowed while session is {self._state.value}",
                field="state",
            )
