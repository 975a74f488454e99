"""
Engines Package

Pure, synchronous calculations over caller-supplied ledger snapshots.
"""

from finance_engine.engines.balance import (
    BalanceEngine,
    reconstruct_balances,
    total_balance,
)
from finance_engine.engines.health import (
    assess_health,
    classify_health,
    summarize_cash_flow,
)
from finance_engine.engines.projection import CurrencyConverter, project_month
from finance_engine.engines.receivables import (
    effective_transaction_value,
    total_payables,
    total_receivables,
)
from finance_engine.engines.settlement import (
    SettlementEngine,
    plan_settlements,
)

__all__ = [
    "BalanceEngine",
    "CurrencyConverter",
    "SettlementEngine",
    "assess_health",
    "classify_health",
    "effective_transaction_value",
    "plan_settlements",
    "project_month",
    "reconstruct_balances",
    "summarize_cash_flow",
    "total_balance",
    "total_payables",
    "total_receivables",
]
