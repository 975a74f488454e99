"""
Settlement Instructions

Runs the settlement engine and renders its plan as the sentences the
application shows, one per payment.
"""

from typing import Iterable, Optional, Sequence

from finance_engine.audit import AuditLogger
from finance_engine.config import EngineSettings
from finance_engine.engines.settlement import plan_settlements
from finance_engine.models.ledger import Transaction, TripParticipant
from finance_engine.presentation.formatting import settlement_lines


def calculate_debts(
    transactions: Iterable[Transaction],
    participants: Sequence[TripParticipant],
    trip_id: Optional[str] = None,
    audit_logger: Optional[AuditLogger] = None,
    settings: Optional[EngineSettings] = None,
) -> list[str]:
    """
    Settlement instructions as display lines.

    Returns the single all-settled sentinel line when nobody owes anything.
    """
    plan = plan_settlements(transactions, participants, trip_id, audit_logger)
    return settlement_lines(plan, participants, settings)
