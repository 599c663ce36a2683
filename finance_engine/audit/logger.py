"""
Audit Logger

DESIGN DECISION: The engine logs, it never stores.
Every simulation session step is logged and kept in an in-memory trail:
1. Traceability of what the user explored
2. Debugging capability
3. The caller decides whether to persist the trail

The audit logger:
- Is synchronous (the engine has no I/O and no suspension points)
- Never changes a computed result
- Supports session IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finance_engine.config import get_settings
from finance_engine.models.audit import AuditEvent, AuditSeverity


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """
    Configure structlog for the engine.

    Arguments override the FINANCE_ENGINE_LOG_LEVEL / FINANCE_ENGINE_LOG_JSON
    settings when given.
    """
    settings = get_settings().logging
    level = level or settings.log_level
    json_output = settings.log_json if json_output is None else json_output

    logging.getLogger("finance_engine").setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger for an engine module (pass __name__)."""
    return structlog.get_logger(name)


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An in-memory trail (for the caller to inspect or persist)
    """

    def __init__(self) -> None:
        self._events: list[AuditEvent] = []
        self._logger = get_logger("finance_engine.audit")

    @property
    def events(self) -> tuple[AuditEvent, ...]:
        """Events logged so far, oldest first."""
        return tuple(self._events)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event and append it to the trail."""
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        self._events.append(event)


def create_session_id() -> UUID:
    """
    Create a new session ID for tracking related events.

    Use this when a simulation session starts and pass it to every
    event of that session.
    """
    return uuid4()
