"""
Ledger Consistency Checks

DESIGN DECISION: The checker is advisory only.
It never raises and never fixes anything; it reports what it finds so the
application can show it next to the balances. The engines keep computing
best-effort numbers from the same data regardless of what is reported here.

CHECKS (active transactions only):
- Orphaned transaction (source account missing, unless shared/foreign-paid)
- Invalid amount (missing, zero or negative)
- Over-split (assigned shares exceed the amount)
- Transfer with missing/unknown destination
- Circular transfer (source equals destination)
- Multi-currency transfer without a destination amount
"""

from typing import Iterable, Optional

from finance_engine.audit import AuditLogger
from finance_engine.models.audit import AuditEventBuilder
from finance_engine.models.ledger import Account, Transaction, TransactionType
from finance_engine.models.report import (
    ConsistencyIssue,
    ConsistencyIssueType,
    ConsistencyReport,
)


class ConsistencyChecker:
    """
    Validates ledger invariants across accounts and transactions.
    """

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._audit = audit_logger or AuditLogger()

    @staticmethod
    def _issue(
        tx: Transaction,
        issue_type: ConsistencyIssueType,
        message: str,
        severity: str = "warning",
    ) -> ConsistencyIssue:
        return ConsistencyIssue(
            transaction_id=tx.id,
            issue_type=issue_type,
            message=f"{message} - ID Transação: {tx.id}",
            severity=severity,
        )

    def _check_transaction(
        self,
        tx: Transaction,
        accounts: dict[str, Account],
    ) -> list[ConsistencyIssue]:
        issues = []

        # Shared or foreign-paid records may legitimately lack a local account
        pending_shared = tx.is_shared or tx.paid_by_member
        if (not tx.account_id or tx.account_id not in accounts) and not pending_shared:
            issues.append(self._issue(
                tx,
                ConsistencyIssueType.ORPHANED_TRANSACTION,
                f"Transação órfã encontrada: {tx.description} (ID da conta inválido)",
                severity="error",
            ))

        if not tx.has_positive_amount:
            issues.append(self._issue(
                tx,
                ConsistencyIssueType.INVALID_AMOUNT,
                f"Transação com valor inválido: {tx.description} (Valor: {tx.amount})",
                severity="error",
            ))

        if tx.is_over_split:
            issues.append(self._issue(
                tx,
                ConsistencyIssueType.OVER_SPLIT,
                f"Divisão incorreta: {tx.description} (Soma das partes maior que o total)",
            ))

        if tx.type == TransactionType.TRANSFER:
            issues.extend(self._check_transfer(tx, accounts))

        return issues

    def _check_transfer(
        self,
        tx: Transaction,
        accounts: dict[str, Account],
    ) -> list[ConsistencyIssue]:
        issues = []
        destination_id = tx.destination_account_id

        if not destination_id or destination_id not in accounts:
            issues.append(self._issue(
                tx,
                ConsistencyIssueType.INVALID_DESTINATION,
                f"Transferência inconsistente: {tx.description} (Conta destino inválida)",
                severity="error",
            ))

        if tx.account_id and tx.account_id == destination_id:
            issues.append(self._issue(
                tx,
                ConsistencyIssueType.CIRCULAR_TRANSFER,
                f"Transferência circular detectada: {tx.description} (Origem igual ao Destino)",
            ))

        source = accounts.get(tx.account_id) if tx.account_id else None
        destination = accounts.get(destination_id) if destination_id else None
        if source and destination and source.currency != destination.currency:
            if tx.destination_amount is None or tx.destination_amount <= 0:
                issues.append(self._issue(
                    tx,
                    ConsistencyIssueType.INCOMPLETE_MULTI_CURRENCY,
                    f"Transferência multi-moeda incompleta: {tx.description} (Sem valor de destino)",
                    severity="error",
                ))

        return issues

    def check(
        self,
        accounts: Iterable[Account],
        transactions: Iterable[Transaction],
    ) -> ConsistencyReport:
        """
        Run every check over the active (non-deleted) transactions.

        Returns:
            ConsistencyReport with all issues found, in transaction order
        """
        by_id: dict[str, Account] = {}
        for account in accounts:
            by_id.setdefault(account.id, account)

        issues: list[ConsistencyIssue] = []
        checked = 0
        for tx in transactions:
            if tx.deleted:
                continue
            checked += 1
            issues.extend(self._check_transaction(tx, by_id))

        self._audit.log(AuditEventBuilder.consistency_checked(
            transaction_count=checked,
            issue_count=len(issues),
        ))

        return ConsistencyReport(issues=issues)


def check_consistency(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    audit_logger: Optional[AuditLogger] = None,
) -> list[str]:
    """Human-readable consistency issues (empty when the ledger is clean)."""
    return ConsistencyChecker(audit_logger).check(accounts, transactions).messages
