"""Audit logging package."""

from finance_engine.audit.logger import (
    AuditLogger,
    configure_logging,
    create_correlation_id,
    get_logger,
)
from finance_engine.audit.sink import AuditSink, InMemoryAuditSink

__all__ = [
    "AuditLogger",
    "AuditSink",
    "InMemoryAuditSink",
    "configure_logging",
    "create_correlation_id",
    "get_logger",
]
