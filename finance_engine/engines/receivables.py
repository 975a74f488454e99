"""
Shared-Expense Positions

What a shared expense really costs the owner, what others still owe the
owner (receivables, an asset) and what the owner still owes others
(payables, a liability).
"""

from decimal import Decimal
from typing import Iterable

from finance_engine.models.ledger import (
    ExplicitSplit,
    Transaction,
    TransactionType,
)
from finance_engine.money import ZERO, add, multiply, subtract


def effective_transaction_value(tx: Transaction) -> Decimal:
    """
    The owner's real cost of a transaction.

    - Not an expense, or not shared: the full amount
    - Owner paid and split: amount minus everybody else's shares
    - Someone else paid: the owner's share (never below zero)
    - Splits above the amount fall back to the full amount
    """
    amount = tx.amount if tx.has_positive_amount else ZERO
    if tx.type != TransactionType.EXPENSE:
        return amount

    shared = tx.is_shared or bool(tx.shared_with) or tx.paid_by_member
    if not shared:
        return amount

    splits_total = tx.splits_total
    # Any excess, even within the one-cent tolerance, would turn the cost negative
    if splits_total > amount:
        return amount

    own_share = subtract(amount, splits_total)
    if tx.payer.is_owner:
        return own_share
    return max(ZERO, own_share)


def total_receivables(transactions: Iterable[Transaction]) -> Decimal:
    """
    Sum of unsettled shares others owe on expenses the owner paid.

    Records without a source account are ignored. Shares are converted with
    the transaction's own exchange_rate when it carries one.
    """
    total = ZERO
    for tx in transactions:
        if tx.deleted or not tx.account_id:
            continue
        split = tx.expense_split
        if not isinstance(split, ExplicitSplit) or not split.payer.is_owner:
            continue
        if not tx.is_shared:
            continue

        for share in split.splits:
            if share.is_settled:
                continue
            value = share.assigned_amount
            if tx.exchange_rate is not None and tx.exchange_rate > 0:
                value = multiply(value, tx.exchange_rate)
            total = add(total, value)
    return total


def total_payables(
    transactions: Iterable[Transaction],
    reference_currency: str = "BRL",
) -> Decimal:
    """
    Sum of unsettled shared expenses someone else paid for the owner.

    These records mirror the owner's part, so the amount itself is the debt.
    Records in a currency other than reference_currency are left out.
    """
    total = ZERO
    for tx in transactions:
        if tx.deleted or tx.is_settled or not tx.has_positive_amount:
            continue
        if tx.type != TransactionType.EXPENSE or not tx.paid_by_member:
            continue
        if not tx.is_shared:
            continue
        if tx.currency and tx.currency != reference_currency.upper():
            continue
        total = add(total, tx.amount)
    return total
