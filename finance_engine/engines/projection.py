"""
Month Projection

Splits one calendar month into what already happened (realized) and what
is still expected (pending), and projects the liquid balance at the end of
the month:

    projected = current liquid balance + pending income - pending expenses

RULES:
- Only liquid accounts (checking, savings, cash) hold the current balance
- Income counts when it lands in a liquid account
- Expenses count when they leave a liquid account or a credit card
- Open shared expenses the owner paid are pending income (receivables);
  open shared expenses someone else paid are pending expenses (payables)
- Transfers only matter while still in the future, and only when they
  cross the liquid boundary
"""

import datetime as dt
from decimal import Decimal
from typing import Callable, Iterable, Optional

from finance_engine.audit import get_logger
from finance_engine.config import EngineSettings, get_settings
from finance_engine.models.ledger import Account, AccountType, Transaction, TransactionType
from finance_engine.models.report import MonthProjection
from finance_engine.money import ZERO, Number, add, money_sum, multiply, round2

# toReferenceCurrency(amount, currency_code) -> amount in the reference currency
CurrencyConverter = Callable[[Decimal, str], Decimal]

logger = get_logger("projection")


class ReferenceConverter:
    """
    Brings amounts into the reference currency.

    Without an injected converter only amounts already in the reference
    currency can be used; the ids of everything else are remembered.
    """

    def __init__(
        self,
        reference_currency: str,
        converter: Optional[CurrencyConverter] = None,
    ):
        self.reference_currency = reference_currency.upper()
        self._converter = converter
        self.unconverted: list[str] = []

    def convert(
        self,
        amount: Number,
        currency: Optional[str],
        entity_id: str,
    ) -> Optional[Decimal]:
        currency = (currency or self.reference_currency).upper()
        if currency == self.reference_currency:
            return round2(amount)
        if self._converter is None:
            if entity_id not in self.unconverted:
                self.unconverted.append(entity_id)
            return None
        return round2(self._converter(round2(amount), currency))

    def transaction_amount(
        self,
        tx: Transaction,
        amount: Number,
        source: Optional[Account] = None,
    ) -> Optional[Decimal]:
        """A transaction's own exchange rate wins over the converter."""
        if tx.exchange_rate is not None and tx.exchange_rate > 0:
            return multiply(amount, tx.exchange_rate)
        currency = tx.currency or (source.currency if source else None)
        return self.convert(amount, currency, tx.id)


def _in_month(day: dt.date, as_of: dt.date) -> bool:
    return day.year == as_of.year and day.month == as_of.month


def project_month(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    as_of: dt.date,
    converter: Optional[CurrencyConverter] = None,
    settings: Optional[EngineSettings] = None,
) -> MonthProjection:
    """
    Realized vs pending totals for the month containing as_of.

    Args:
        accounts: Accounts carrying their current (reconstructed) balances
        transactions: The full ledger; only as_of's month is considered
        as_of: The day separating realized from pending movements
        converter: toReferenceCurrency(amount, currency) collaborator
        settings: Engine settings (reference currency)

    Returns:
        MonthProjection in the reference currency
    """
    settings = settings or get_settings().engine
    rates = ReferenceConverter(settings.reference_currency, converter)
    reference = rates.reference_currency

    by_id: dict[str, Account] = {}
    for account in accounts:
        by_id.setdefault(account.id, account)
    liquid_ids = {a.id for a in by_id.values() if a.is_liquid}
    card_ids = {a.id for a in by_id.values() if a.type == AccountType.CREDIT_CARD}

    current_balance = ZERO
    for account in by_id.values():
        if not account.is_liquid:
            continue
        value = rates.convert(account.balance, account.currency, account.id)
        if value is not None:
            current_balance = add(current_balance, value)

    realized_income = realized_expenses = ZERO
    pending_income = pending_expenses = ZERO

    for tx in transactions:
        if tx.deleted or not tx.has_positive_amount:
            continue
        if not _in_month(tx.date, as_of):
            continue

        is_future = tx.date > as_of
        source = by_id.get(tx.account_id) if tx.account_id else None
        in_reference = tx.currency is None or tx.currency == reference

        if tx.type == TransactionType.EXPENSE:
            if tx.paid_by_member:
                # Payable: counts only while unpaid, never as a regular expense
                if not tx.is_settled and in_reference:
                    value = rates.transaction_amount(tx, tx.amount, source)
                    if value is not None:
                        pending_expenses = add(pending_expenses, value)
                continue

            if (tx.is_shared or tx.shared_with) and in_reference:
                open_shares = money_sum(
                    s.assigned_amount for s in tx.shared_with if not s.is_settled
                )
                if open_shares > 0:
                    value = rates.transaction_amount(tx, open_shares, source)
                    if value is not None:
                        pending_income = add(pending_income, value)

            if tx.account_id in liquid_ids or tx.account_id in card_ids:
                value = rates.transaction_amount(tx, tx.amount, source)
                if value is None:
                    continue
                if is_future:
                    pending_expenses = add(pending_expenses, value)
                else:
                    realized_expenses = add(realized_expenses, value)

        elif tx.type == TransactionType.INCOME:
            if tx.account_id in liquid_ids:
                value = rates.transaction_amount(tx, tx.amount, source)
                if value is None:
                    continue
                if is_future:
                    pending_income = add(pending_income, value)
                else:
                    realized_income = add(realized_income, value)

        elif is_future:
            source_liquid = tx.account_id in liquid_ids
            destination_id = tx.destination_account_id
            destination_liquid = destination_id in liquid_ids

            if source_liquid and not destination_liquid:
                # Paying a card bill is already counted as the card's expenses
                if destination_id not in card_ids:
                    value = rates.transaction_amount(tx, tx.amount, source)
                    if value is not None:
                        pending_expenses = add(pending_expenses, value)

            elif destination_liquid and not source_liquid:
                destination = by_id[destination_id]
                if tx.destination_amount is not None and tx.destination_amount > 0:
                    value = rates.convert(tx.destination_amount, destination.currency, tx.id)
                else:
                    value = rates.transaction_amount(tx, tx.amount, source)
                if value is not None:
                    pending_income = add(pending_income, value)

    if rates.unconverted:
        logger.warning(
            "projection_amounts_not_converted",
            ids=rates.unconverted,
            reference_currency=reference,
        )

    return MonthProjection(
        reference_currency=reference,
        as_of=as_of,
        current_balance=current_balance,
        realized_income=realized_income,
        realized_expenses=realized_expenses,
        pending_income=pending_income,
        pending_expenses=pending_expenses,
        unconverted=rates.unconverted,
    )
