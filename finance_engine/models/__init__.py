"""
Data Models Package

This package contains all Pydantic models used by the finance engine.
All data flowing into and out of the engines conforms to these schemas.
"""

from finance_engine.models.ledger import (
    EXTERNAL_ACCOUNT_ID,
    OWNER_ID,
    Account,
    AccountType,
    ExpenseSplit,
    ExplicitSplit,
    ImplicitSplit,
    Payer,
    Transaction,
    TransactionSplit,
    TransactionType,
    TripParticipant,
    UnsharedExpense,
    participant_key,
)
from finance_engine.models.report import (
    CashFlow,
    ConsistencyIssue,
    ConsistencyIssueType,
    ConsistencyReport,
    HealthStatus,
    LedgerSummary,
    MonthProjection,
    Settlement,
    SettlementPlan,
)
from finance_engine.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "EXTERNAL_ACCOUNT_ID",
    "OWNER_ID",
    "Account",
    "AccountType",
    "ExpenseSplit",
    "ExplicitSplit",
    "ImplicitSplit",
    "Payer",
    "Transaction",
    "TransactionSplit",
    "TransactionType",
    "TripParticipant",
    "UnsharedExpense",
    "participant_key",
    # Result models
    "CashFlow",
    "ConsistencyIssue",
    "ConsistencyIssueType",
    "ConsistencyReport",
    "HealthStatus",
    "LedgerSummary",
    "MonthProjection",
    "Settlement",
    "SettlementPlan",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
