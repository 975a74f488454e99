"""
Shared Finance Engine - Source Package

Balance & settlement engine for a personal/shared-finance application.

DESIGN PRINCIPLES:
1. Pure functions over caller-supplied snapshots (no I/O, no shared state)
2. Degrade gracefully: dirty data yields a best-effort answer plus an audit event
3. Money is Decimal, rounded to cents after every accumulation
4. Engines return structured results; text is produced at the presentation edge
"""

__version__ = "1.0.0"
__author__ = "Shared Finance Team"

from finance_engine.engines import (
    classify_health,
    plan_settlements,
    project_month,
    reconstruct_balances,
)
from finance_engine.orchestrator import FinanceLedger
from finance_engine.presentation import calculate_debts
from finance_engine.validation import check_consistency

__all__ = [
    "FinanceLedger",
    "calculate_debts",
    "check_consistency",
    "classify_health",
    "plan_settlements",
    "project_month",
    "reconstruct_balances",
]
