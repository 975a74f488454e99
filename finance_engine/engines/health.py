"""
Financial Health

Classifies an income/expense pair by savings rate, and derives that pair
from the ledger for a date window.
"""

import datetime as dt
from typing import Iterable, Optional

from finance_engine.config import EngineSettings, get_settings
from finance_engine.engines.receivables import effective_transaction_value
from finance_engine.models.ledger import Transaction, TransactionType
from finance_engine.models.report import CashFlow, HealthStatus
from finance_engine.money import ZERO, Number, add, subtract, to_decimal


def classify_health(
    income: Number,
    expense: Number,
    settings: Optional[EngineSettings] = None,
) -> HealthStatus:
    """
    POSITIVE, WARNING or CRITICAL from income and expense totals.

    - No income: CRITICAL if anything was spent, POSITIVE otherwise
    - Spending more than earned: CRITICAL
    - Saving less than the warning rate (10% by default): WARNING
    """
    settings = settings or get_settings().engine
    income = to_decimal(income)
    expense = to_decimal(expense)

    if income == 0:
        return HealthStatus.CRITICAL if expense > 0 else HealthStatus.POSITIVE

    savings_rate = (income - expense) / income
    if savings_rate < 0:
        return HealthStatus.CRITICAL
    if savings_rate < settings.health_warning_savings_rate:
        return HealthStatus.WARNING
    return HealthStatus.POSITIVE


def summarize_cash_flow(
    transactions: Iterable[Transaction],
    start: Optional[dt.date] = None,
    end: Optional[dt.date] = None,
) -> CashFlow:
    """
    Income and expense totals for transactions dated within [start, end].

    Transfers move money between the owner's own accounts and are left out.
    Debts someone else paid only count once settled, at the owner's share.
    Refunds reduce expenses whichever type they are recorded as.
    """
    income = ZERO
    expense = ZERO
    for tx in transactions:
        if tx.deleted or not tx.has_positive_amount:
            continue
        if start is not None and tx.date < start:
            continue
        if end is not None and tx.date > end:
            continue

        if tx.type == TransactionType.INCOME:
            if tx.is_refund:
                expense = subtract(expense, tx.amount)
            else:
                income = add(income, tx.amount)

        elif tx.type == TransactionType.EXPENSE:
            if tx.paid_by_member and not tx.is_settled:
                continue
            amount = tx.amount
            if tx.paid_by_member and tx.is_shared:
                amount = effective_transaction_value(tx)
            if tx.is_refund:
                expense = subtract(expense, amount)
            else:
                expense = add(expense, amount)

    return CashFlow(income=income, expense=expense)


def assess_health(
    transactions: Iterable[Transaction],
    start: Optional[dt.date] = None,
    end: Optional[dt.date] = None,
    settings: Optional[EngineSettings] = None,
) -> HealthStatus:
    """classify_health over the cash flow of a date window."""
    flow = summarize_cash_flow(transactions, start, end)
    return classify_health(flow.income, flow.expense, settings)
