"""
Settlement / Debt-Netting Engine

Two phases:

PHASE A - NET BALANCES:
Every unsettled shared expense moves money between participants' net
positions (positive = is owed money, negative = owes money). Every credit
is matched by debits of the same total, so the positions always sum to zero.

PHASE B - GREEDY NETTING:
The largest debtor pays the largest creditor until one of the lists runs
out. This is deterministic but not guaranteed to minimise the number of
payments in every case; the output order is part of the contract, so it
is kept as is.
"""

from decimal import Decimal
from typing import Iterable, Optional, Sequence

from finance_engine.audit import AuditLogger
from finance_engine.models.audit import AuditEventBuilder
from finance_engine.models.ledger import (
    OWNER_ID,
    ExplicitSplit,
    ImplicitSplit,
    Payer,
    Transaction,
    TransactionType,
    TripParticipant,
    participant_key,
)
from finance_engine.models.report import Settlement, SettlementPlan
from finance_engine.money import (
    TOLERANCE,
    ZERO,
    add,
    divide,
    is_negligible,
    money_sum,
    round2,
    subtract,
)


class SettlementEngine:
    """
    Computes who owes whom from a set of shared expenses.

    participants never include the primary user; the owner is always
    tracked under OWNER_ID.
    """

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._audit = audit_logger or AuditLogger()

    # -------------------------------------------------------------------------
    # Phase A
    # -------------------------------------------------------------------------

    def net_balances(
        self,
        transactions: Iterable[Transaction],
        participants: Sequence[TripParticipant],
    ) -> dict[str, Decimal]:
        """Signed net position per participant id (owner first)."""
        balances: dict[str, Decimal] = {OWNER_ID: ZERO}
        for participant in participants:
            balances.setdefault(participant_key(participant.id), ZERO)

        for tx in transactions:
            if tx.deleted or tx.type != TransactionType.EXPENSE:
                continue
            # The whole debt to another payer has already been paid back
            if tx.paid_by_member and tx.is_settled:
                continue

            if tx.is_over_split:
                self._audit.log(AuditEventBuilder.split_overflow(
                    transaction_id=tx.id,
                    amount=round2(tx.amount),
                    splits_total=tx.splits_total,
                ))

            split = tx.expense_split
            if isinstance(split, ExplicitSplit):
                self._apply_explicit(tx, split, balances)
            elif isinstance(split, ImplicitSplit):
                self._apply_implicit(tx, split.payer, participants, balances)

        return balances

    @staticmethod
    def _move(balances: dict[str, Decimal], key: str, change: Decimal) -> None:
        balances[key] = add(balances.get(key, ZERO), change)

    def _apply_explicit(
        self,
        tx: Transaction,
        split: ExplicitSplit,
        balances: dict[str, Decimal],
    ) -> None:
        debited = []
        for share in split.splits:
            # A settled share has been paid back to the payer already
            if share.is_settled:
                continue
            self._move(balances, participant_key(share.member_id), -share.assigned_amount)
            debited.append(share.assigned_amount)

        if not split.payer.is_owner:
            # Whatever nobody was assigned is the owner's own share
            remainder = subtract(tx.amount or ZERO, money_sum(s.assigned_amount for s in split.splits))
            if remainder > TOLERANCE:
                self._move(balances, OWNER_ID, -remainder)
                debited.append(remainder)

        self._move(balances, split.payer.key, money_sum(debited))

    def _apply_implicit(
        self,
        tx: Transaction,
        payer: Payer,
        participants: Sequence[TripParticipant],
        balances: dict[str, Decimal],
    ) -> None:
        involved = [OWNER_ID]
        for participant in participants:
            key = participant_key(participant.id)
            if key not in involved:
                involved.append(key)

        share = divide(tx.amount or ZERO, len(involved))
        if share <= ZERO:
            return

        credit = ZERO
        for key in involved:
            if key == payer.key:
                continue
            self._move(balances, key, -share)
            credit = add(credit, share)
        self._move(balances, payer.key, credit)

    # -------------------------------------------------------------------------
    # Phase B
    # -------------------------------------------------------------------------

    @staticmethod
    def net_debts(balances: dict[str, Decimal]) -> list[Settlement]:
        """
        Greedy debtor/creditor matching.

        Ties keep the insertion order of balances (sorts are stable).
        """
        debtors: list[list] = []
        creditors: list[list] = []
        for key, balance in balances.items():
            value = round2(balance)
            if value < -TOLERANCE:
                debtors.append([key, value])
            elif value > TOLERANCE:
                creditors.append([key, value])

        debtors.sort(key=lambda entry: entry[1])
        creditors.sort(key=lambda entry: entry[1], reverse=True)

        settlements: list[Settlement] = []
        i = j = 0
        while i < len(debtors) and j < len(creditors):
            debtor, creditor = debtors[i], creditors[j]
            amount = round2(min(abs(debtor[1]), creditor[1]))

            if amount > ZERO:
                settlements.append(Settlement(
                    debtor_id=debtor[0],
                    creditor_id=creditor[0],
                    amount=amount,
                ))
                debtor[1] = add(debtor[1], amount)
                creditor[1] = subtract(creditor[1], amount)

            if is_negligible(debtor[1]):
                i += 1
            if creditor[1] < TOLERANCE:
                j += 1

        return settlements

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def plan(
        self,
        transactions: Iterable[Transaction],
        participants: Sequence[TripParticipant],
        trip_id: Optional[str] = None,
    ) -> SettlementPlan:
        """
        Run both phases.

        Args:
            transactions: Ledger entries (only EXPENSE rows matter)
            participants: Members other than the primary user
            trip_id: If given, only that trip's transactions are considered
        """
        if trip_id is not None:
            transactions = [tx for tx in transactions if tx.trip_id == trip_id]

        balances = self.net_balances(transactions, participants)
        settlements = self.net_debts(balances)

        self._audit.log(AuditEventBuilder.settlement_computed(
            participant_count=len(balances),
            settlement_count=len(settlements),
        ))

        return SettlementPlan(
            balances={key: round2(value) for key, value in balances.items()},
            settlements=settlements,
        )


def plan_settlements(
    transactions: Iterable[Transaction],
    participants: Sequence[TripParticipant],
    trip_id: Optional[str] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> SettlementPlan:
    """Functional entry point for SettlementEngine.plan."""
    return SettlementEngine(audit_logger).plan(transactions, participants, trip_id)
