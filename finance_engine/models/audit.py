"""
Audit Models for the Finance Engine

Simulation sessions emit audit events so a reviewer can reconstruct what
the user explored before applying (or discarding) a change.

DESIGN DECISION: Audit events are append-only and in-memory.
The engine never persists them; a caller that wants a durable trail
reads session.events and stores them itself.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Simulation session lifecycle
    SIMULATION_STARTED = "simulation_started"
    SIMULATION_PREVIEWED = "simulation_previewed"
    SIMULATION_APPLIED = "simulation_applied"
    SIMULATION_DISCARDED = "simulation_discarded"

    # Input errors surfaced to the caller
    INVALID_ARGUMENT = "invalid_argument"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """A single audit event."""

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Correlation - every event of one session shares this
    session_id: Optional[UUID] = Field(
        default=None,
        description="Simulation session this event belongs to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "session_id": str(self.session_id) if self.session_id else None,
            "description": self.description,
            "details": self.details,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.simulation_started(session_id, "postponement", tx_id)
    """

    @staticmethod
    def simulation_started(
        session_id: UUID,
        scenario: str,
        transaction_id: Optional[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIMULATION_STARTED,
            session_id=session_id,
            description=f"Simulation started: {scenario}",
            details={
                "scenario": scenario,
                "transaction_id": transaction_id,
            },
        )

    @staticmethod
    def simulation_previewed(
        session_id: UUID,
        difference: str,
        is_improvement: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIMULATION_PREVIEWED,
            session_id=session_id,
            description="Simulation preview computed",
            details={
                "difference": difference,
                "is_improvement": is_improvement,
            },
        )

    @staticmethod
    def simulation_applied(
        session_id: UUID,
        transaction_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIMULATION_APPLIED,
            session_id=session_id,
            description="Simulation handed over for persistence",
            details={"transaction_count": transaction_count},
        )

    @staticmethod
    def simulation_discarded(session_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIMULATION_DISCARDED,
            session_id=session_id,
            description="Simulation discarded",
        )

    @staticmethod
    def invalid_argument(
        session_id: Optional[UUID],
        field: Optional[str],
        message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVALID_ARGUMENT,
            severity=AuditSeverity.WARNING,
            session_id=session_id,
            description=f"Invalid argument: {message}"[:500],
            details={"field": field},
        )
