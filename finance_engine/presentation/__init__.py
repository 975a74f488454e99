"""Presentation helpers: turn engine results into display text."""

from finance_engine.presentation.formatting import (
    consistency_summary,
    describe_settlement,
    format_currency,
    participant_name,
    settlement_lines,
)
from finance_engine.presentation.debts import calculate_debts

__all__ = [
    "calculate_debts",
    "consistency_summary",
    "describe_settlement",
    "format_currency",
    "participant_name",
    "settlement_lines",
]
