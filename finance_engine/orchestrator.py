"""
Ledger Facade for the Finance Engine

This module ties the engines together around one ledger snapshot:
1. Balances (current or point-in-time)
2. Consistency report
3. Settlements (who owes whom, optionally per trip)
4. Month projection (realized vs pending)
5. Summary (liquid balance, receivables, payables, health)

DESIGN DECISION: The facade owns no data. The caller hands it a snapshot
of accounts and transactions; every method is a pure computation over that
snapshot, audited under a single correlation id per call.

Currency conversion is an injected collaborator. Without a converter only
accounts already in the reference currency are aggregated.
"""

import datetime as dt
from typing import Iterable, Optional, Sequence
from uuid import UUID

from finance_engine.audit import AuditLogger, AuditSink, create_correlation_id, get_logger
from finance_engine.config import EngineSettings, get_settings
from finance_engine.engines.balance import BalanceEngine, Cutoff
from finance_engine.engines.health import classify_health, summarize_cash_flow
from finance_engine.engines.projection import CurrencyConverter, project_month
from finance_engine.engines.receivables import total_payables, total_receivables
from finance_engine.engines.settlement import SettlementEngine
from finance_engine.models.ledger import Account, Transaction, TripParticipant
from finance_engine.models.report import (
    CashFlow,
    ConsistencyReport,
    HealthStatus,
    LedgerSummary,
    MonthProjection,
    SettlementPlan,
)
from finance_engine.money import ZERO, add, round2
from finance_engine.presentation import settlement_lines
from finance_engine.validation import ConsistencyChecker



class FinanceLedger:
    """
    One ledger snapshot plus every engine operation over it.

    Usage:
        ledger = FinanceLedger(accounts, transactions)
        accounts = ledger.balances()
        lines = ledger.debts(participants, trip_id="trip-1")
    """

    def __init__(
        self,
        accounts: Iterable[Account],
        transactions: Iterable[Transaction],
        audit_sink: Optional[AuditSink] = None,
        settings: Optional[EngineSettings] = None,
    ):
        # Snapshot: later changes to the caller's lists do not leak in
        self._accounts: tuple[Account, ...] = tuple(accounts)
        self._transactions: tuple[Transaction, ...] = tuple(transactions)
        self._audit_sink = audit_sink
        self._settings = settings or get_settings().engine
        self._logger = get_logger("ledger")

    @property
    def accounts(self) -> tuple[Account, ...]:
        return self._accounts

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._transactions

    def _audit(self, correlation_id: Optional[UUID]) -> AuditLogger:
        return AuditLogger(
            sink=self._audit_sink,
            correlation_id=correlation_id or create_correlation_id(),
        )

    def balances(
        self,
        cutoff: Optional[Cutoff] = None,
        correlation_id: Optional[UUID] = None,
    ) -> list[Account]:
        """Accounts with balances reconstructed up to cutoff (inclusive)."""
        engine = BalanceEngine(self._audit(correlation_id))
        return engine.reconstruct(self._accounts, self._transactions, cutoff)

    def consistency(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> ConsistencyReport:
        checker = ConsistencyChecker(self._audit(correlation_id))
        return checker.check(self._accounts, self._transactions)

    def settlements(
        self,
        participants: Sequence[TripParticipant],
        trip_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> SettlementPlan:
        engine = SettlementEngine(self._audit(correlation_id))
        return engine.plan(self._transactions, participants, trip_id)

    def debts(
        self,
        participants: Sequence[TripParticipant],
        trip_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> list[str]:
        """Settlement instructions as display lines."""
        plan = self.settlements(participants, trip_id, correlation_id)
        return settlement_lines(plan, participants, self._settings)

    def cash_flow(
        self,
        start: Optional[dt.date] = None,
        end: Optional[dt.date] = None,
    ) -> CashFlow:
        return summarize_cash_flow(self._transactions, start, end)

    def health(
        self,
        start: Optional[dt.date] = None,
        end: Optional[dt.date] = None,
    ) -> HealthStatus:
        flow = self.cash_flow(start, end)
        return classify_health(flow.income, flow.expense, self._settings)

    def projection(
        self,
        as_of: dt.date,
        converter: Optional[CurrencyConverter] = None,
    ) -> MonthProjection:
        """
        Realized vs pending figures for as_of's month.

        The current balance uses the accounts reconstructed up to as_of.
        """
        correlation_id = create_correlation_id()
        accounts = self.balances(as_of, correlation_id)
        return project_month(
            accounts,
            self._transactions,
            as_of,
            converter=converter,
            settings=self._settings,
        )

    def summary(
        self,
        converter: Optional[CurrencyConverter] = None,
        cutoff: Optional[Cutoff] = None,
    ) -> LedgerSummary:
        """
        Aggregate the snapshot in the reference currency.

        Args:
            converter: toReferenceCurrency(amount, currency) collaborator.
                       If None, foreign-currency accounts are left out.
            cutoff: Point in time for the balances

        Returns:
            LedgerSummary (liquid balance, receivables, payables, issues)
        """
        correlation_id = create_correlation_id()
        reference = self._settings.reference_currency

        accounts = self.balances(cutoff, correlation_id)
        report = self.consistency(correlation_id)

        liquid = ZERO
        unconverted: list[str] = []
        for account in accounts:
            if not account.is_liquid:
                continue
            if account.currency == reference:
                liquid = add(liquid, account.balance)
            elif converter is not None:
                liquid = add(liquid, round2(converter(account.balance, account.currency)))
            else:
                unconverted.append(account.id)

        if unconverted:
            self._logger.warning(
                "accounts_not_converted",
                account_ids=unconverted,
                reference_currency=reference,
                correlation_id=str(correlation_id),
            )

        return LedgerSummary(
            reference_currency=reference,
            accounts=accounts,
            liquid_balance=liquid,
            receivables=total_receivables(self._transactions),
            payables=total_payables(self._transactions, reference),
            unconverted_accounts=unconverted,
            issues=report.messages,
        )
