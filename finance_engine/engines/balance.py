"""
Balance Reconstruction Engine

Replays the whole transaction ledger on top of each account's opening
balance and returns fresh account copies carrying the recomputed figure.

GUARANTEES:
- Never mutates the caller's accounts or transactions
- Never raises on dirty data; every fallback becomes an audit event
- Order independent: every transaction touches balances through additions
  only, and every addition is rounded to cents
"""

import datetime as dt
from decimal import Decimal
from typing import Iterable, Optional, Union

from finance_engine.audit import AuditLogger
from finance_engine.models.audit import AuditEventBuilder
from finance_engine.models.ledger import Account, Transaction, TransactionType
from finance_engine.money import ZERO, add, round2, subtract

Cutoff = Union[dt.date, dt.datetime]


def _cutoff_date(cutoff: Optional[Cutoff]) -> Optional[dt.date]:
    """The whole cutoff day is included, so only the calendar date matters."""
    if cutoff is None:
        return None
    if isinstance(cutoff, dt.datetime):
        return cutoff.date()
    return cutoff


def is_active(tx: Transaction, cutoff: Optional[dt.date] = None) -> bool:
    """Not soft-deleted and not dated after the cutoff day."""
    if tx.deleted:
        return False
    return cutoff is None or tx.date <= cutoff


def transfer_incoming_amount(
    tx: Transaction,
    source: Optional[Account],
    destination: Account,
    audit: Optional[AuditLogger] = None,
) -> Decimal:
    """
    Amount a transfer credits to its destination account.

    Cross-currency transfers need destination_amount; without it the amount
    is credited 1:1 so the money does not vanish, and a critical event is
    logged. Same-currency transfers use destination_amount when given.
    """
    has_destination_amount = (
        tx.destination_amount is not None and tx.destination_amount > 0
    )

    if source is not None and source.currency != destination.currency:
        if has_destination_amount:
            return round2(tx.destination_amount)
        if audit:
            audit.log(AuditEventBuilder.currency_fallback(
                transaction_id=tx.id,
                source_currency=source.currency,
                destination_currency=destination.currency,
                amount=round2(tx.amount),
            ))
        return round2(tx.amount)

    if has_destination_amount:
        return round2(tx.destination_amount)
    return round2(tx.amount)


class BalanceEngine:
    """
    Reconstructs account balances from a transaction ledger.

    One instance can serve many calls; it holds no state besides the
    audit logger.
    """

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._audit = audit_logger or AuditLogger()

    def reconstruct(
        self,
        accounts: Iterable[Account],
        transactions: Iterable[Transaction],
        cutoff: Optional[Cutoff] = None,
    ) -> list[Account]:
        """
        Recompute every account balance by replaying the ledger.

        Args:
            accounts: Account snapshots (duplicate ids keep the first one)
            transactions: The full ledger, in any order
            cutoff: Ignore transactions dated after this day (time travel)

        Returns:
            New Account objects, in input order, with balance replaced
        """
        cutoff_day = _cutoff_date(cutoff)

        originals: dict[str, Account] = {}
        balances: dict[str, Decimal] = {}
        for account in accounts:
            if account.id in originals:
                self._audit.log(AuditEventBuilder.duplicate_account(account.id))
                continue
            originals[account.id] = account
            balances[account.id] = round2(account.opening_balance)

        applied = 0
        for tx in transactions:
            if not is_active(tx, cutoff_day):
                continue
            if not tx.has_positive_amount:
                continue
            if self._apply(tx, originals, balances):
                applied += 1

        self._audit.log(AuditEventBuilder.balances_reconstructed(
            account_count=len(originals),
            applied_count=applied,
            cutoff=cutoff_day.isoformat() if cutoff_day else None,
        ))

        return [
            account.model_copy(update={"balance": balances[account_id]})
            for account_id, account in originals.items()
        ]

    def _apply(
        self,
        tx: Transaction,
        accounts: dict[str, Account],
        balances: dict[str, Decimal],
    ) -> bool:
        """Apply one transaction. Returns False when it was skipped."""
        amount = tx.amount

        # Owner-paid money has to leave some account of the ledger
        if not tx.paid_by_member and not tx.has_source_account:
            # Shared records pending payment legitimately float
            if not tx.is_shared:
                self._audit.log(AuditEventBuilder.transaction_without_source(tx.id))
            return False

        source_id = tx.account_id if tx.account_id in balances else None

        if tx.type == TransactionType.EXPENSE:
            # Someone else's payment is a debt, tracked by the settlement engine
            if source_id and not tx.paid_by_member:
                change = amount if tx.is_refund else -amount
                balances[source_id] = add(balances[source_id], change)
            return True

        if tx.type == TransactionType.INCOME:
            if source_id:
                change = -amount if tx.is_refund else amount
                balances[source_id] = add(balances[source_id], change)
            return True

        # TRANSFER
        if source_id:
            balances[source_id] = subtract(balances[source_id], amount)

        destination_id = (tx.destination_account_id or "").strip()
        if not destination_id:
            self._audit.log(AuditEventBuilder.transfer_without_destination(tx.id))
            return True

        if destination_id not in balances:
            self._audit.log(AuditEventBuilder.transfer_destination_not_found(
                tx.id, destination_id,
            ))
            if source_id:
                balances[source_id] = add(balances[source_id], amount)
            return True

        incoming = transfer_incoming_amount(
            tx,
            accounts.get(source_id) if source_id else None,
            accounts[destination_id],
            self._audit,
        )
        balances[destination_id] = add(balances[destination_id], incoming)
        return True


def reconstruct_balances(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    cutoff: Optional[Cutoff] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> list[Account]:
    """Functional entry point for BalanceEngine.reconstruct."""
    return BalanceEngine(audit_logger).reconstruct(accounts, transactions, cutoff)


def total_balance(accounts: Iterable[Account]) -> Decimal:
    """Sum of balances, assuming a single currency."""
    total = ZERO
    for account in accounts:
        total = add(total, account.balance)
    return total
