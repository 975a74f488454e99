"""
Audit Models for the Finance Engine

The engines never raise on dirty ledger data. Instead, every fallback they
apply is recorded as an audit event so the caller can see which numbers
rest on an assumption.

DESIGN DECISION: Audit events are append-only. We never delete or modify them.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Anomalies carry the fallback that was applied; completions summarise
    an engine pass.
    """
    # Balance reconstruction
    BALANCES_RECONSTRUCTED = "balances_reconstructed"
    DUPLICATE_ACCOUNT = "duplicate_account"
    TRANSACTION_WITHOUT_SOURCE = "transaction_without_source"
    TRANSFER_WITHOUT_DESTINATION = "transfer_without_destination"
    TRANSFER_DESTINATION_NOT_FOUND = "transfer_destination_not_found"
    CURRENCY_FALLBACK = "currency_fallback"

    # Settlement
    SPLIT_OVERFLOW = "split_overflow"
    SETTLEMENT_COMPUTED = "settlement_computed"

    # Checks
    CONSISTENCY_CHECKED = "consistency_checked"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    entity_id is the ledger id (transaction or account) the event is about.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'account')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one ledger summary)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.currency_fallback(tx_id, "USD", "BRL", amount)
        event = AuditEventBuilder.settlement_computed(3, 2)
    """

    @staticmethod
    def duplicate_account(
        account_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DUPLICATE_ACCOUNT,
            severity=AuditSeverity.WARNING,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description="Duplicate account id; keeping the first occurrence",
            details={"account_id": account_id},
        )

    @staticmethod
    def transaction_without_source(
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_WITHOUT_SOURCE,
            severity=AuditSeverity.ERROR,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description="Transaction paid by the owner has no source account; ignored",
        )

    @staticmethod
    def transfer_without_destination(
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSFER_WITHOUT_DESTINATION,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description="Transfer has no destination account; only the source was debited",
        )

    @staticmethod
    def transfer_destination_not_found(
        transaction_id: str,
        destination_account_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSFER_DESTINATION_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description="Destination account not found; source debit reverted",
            details={"destination_account_id": destination_account_id},
        )

    @staticmethod
    def currency_fallback(
        transaction_id: str,
        source_currency: str,
        destination_currency: str,
        amount: Decimal,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CURRENCY_FALLBACK,
            severity=AuditSeverity.CRITICAL,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=(
                f"Transfer {source_currency}->{destination_currency} has no destination "
                "amount; credited 1:1"
            ),
            details={
                "source_currency": source_currency,
                "destination_currency": destination_currency,
                "amount": str(amount),
            },
        )

    @staticmethod
    def split_overflow(
        transaction_id: str,
        amount: Decimal,
        splits_total: Decimal,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLIT_OVERFLOW,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description="Splits total exceeds transaction amount; treated as unshared",
            details={"amount": str(amount), "splits_total": str(splits_total)},
        )

    @staticmethod
    def balances_reconstructed(
        account_count: int,
        applied_count: int,
        cutoff: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCES_RECONSTRUCTED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Reconstructed {account_count} account balances",
            details={
                "account_count": account_count,
                "applied_transactions": applied_count,
                "cutoff": cutoff,
            },
        )

    @staticmethod
    def settlement_computed(
        participant_count: int,
        settlement_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SETTLEMENT_COMPUTED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Computed {settlement_count} settlements for {participant_count} participants",
            details={
                "participant_count": participant_count,
                "settlement_count": settlement_count,
            },
        )

    @staticmethod
    def consistency_checked(
        transaction_count: int,
        issue_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONSISTENCY_CHECKED,
            severity=AuditSeverity.WARNING if issue_count else AuditSeverity.INFO,
            correlation_id=correlation_id,
            description=f"Consistency check found {issue_count} issues",
            details={
                "transaction_count": transaction_count,
                "issue_count": issue_count,
            },
        )
