"""Audit logging package."""

from finance_engine.audit.logger import (
    AuditLogger,
    configure_logging,
    create_session_id,
    get_logger,
)

__all__ = ["AuditLogger", "configure_logging", "create_session_id", "get_logger"]
