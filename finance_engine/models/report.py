"""
Engine Result Models

Everything the engines hand back to the caller is structured data.
Human-readable text (Portuguese sentences, currency symbols) is produced
later by finance_engine.presentation, never by the engines.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from finance_engine.models.ledger import Account


# =============================================================================
# SETTLEMENT
# =============================================================================

class Settlement(BaseModel):
    """One payment that clears (part of) a debt: debtor pays creditor."""
    model_config = ConfigDict(frozen=True)

    debtor_id: str
    creditor_id: str
    amount: Decimal = Field(..., gt=0)


class SettlementPlan(BaseModel):
    """
    Result of the debt-netting engine.

    balances keeps insertion order (owner first, then participants in the
    order given, then any other ids met in the transactions); positive
    means the participant is owed money.
    """

    balances: dict[str, Decimal] = Field(default_factory=dict)
    settlements: list[Settlement] = Field(default_factory=list)

    @property
    def is_settled(self) -> bool:
        """True when nobody owes anything."""
        return not self.settlements

    @property
    def total_settled(self) -> Decimal:
        return sum((s.amount for s in self.settlements), Decimal("0"))


# =============================================================================
# CONSISTENCY
# =============================================================================

class ConsistencyIssueType(str, Enum):
    """Kinds of ledger inconsistencies the checker reports."""
    ORPHANED_TRANSACTION = "orphaned_transaction"
    INVALID_AMOUNT = "invalid_amount"
    OVER_SPLIT = "over_split"
    INVALID_DESTINATION = "invalid_destination"
    CIRCULAR_TRANSFER = "circular_transfer"
    INCOMPLETE_MULTI_CURRENCY = "incomplete_multi_currency"


class ConsistencyIssue(BaseModel):
    """A single advisory finding about one transaction."""

    transaction_id: str
    issue_type: ConsistencyIssueType
    message: str = Field(
        ...,
        description="Human-readable description of the issue",
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity",
    )


class ConsistencyReport(BaseModel):
    """All issues found in one pass. Advisory only; never blocks a calculation."""

    issues: list[ConsistencyIssue] = Field(default_factory=list)

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.issues]

    @property
    def is_consistent(self) -> bool:
        return not self.issues

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    def for_transaction(self, transaction_id: str) -> list[ConsistencyIssue]:
        return [i for i in self.issues if i.transaction_id == transaction_id]


# =============================================================================
# HEALTH & CASH FLOW
# =============================================================================

class HealthStatus(str, Enum):
    """Income/expense health classification."""
    POSITIVE = "POSITIVE"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class CashFlow(BaseModel):
    """Income and expense totals over a date window."""
    model_config = ConfigDict(frozen=True)

    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.income - self.expense

    @property
    def savings_rate(self) -> Optional[Decimal]:
        """(income - expense) / income, or None without income."""
        if self.income == 0:
            return None
        return self.net / self.income


class MonthProjection(BaseModel):
    """
    Realized and pending movements of one calendar month.

    Realized figures are dated on or before as_of; pending figures are
    dated later in the same month, plus shared-expense receivables and
    payables that are still open. All amounts are in the reference currency.
    """
    model_config = ConfigDict(frozen=True)

    reference_currency: str
    as_of: dt.date
    current_balance: Decimal = Decimal("0")
    realized_income: Decimal = Decimal("0")
    realized_expenses: Decimal = Decimal("0")
    pending_income: Decimal = Decimal("0")
    pending_expenses: Decimal = Decimal("0")
    unconverted: list[str] = Field(
        default_factory=list,
        description="Account/transaction ids left out for lack of a conversion",
    )

    @property
    def total_month_income(self) -> Decimal:
        return self.realized_income + self.pending_income

    @property
    def total_month_expenses(self) -> Decimal:
        return self.realized_expenses + self.pending_expenses

    @property
    def projected_balance(self) -> Decimal:
        """Liquid balance expected at the end of the month."""
        return self.current_balance + self.pending_income - self.pending_expenses


# =============================================================================
# LEDGER SUMMARY
# =============================================================================

class LedgerSummary(BaseModel):
    """
    Aggregate view of a ledger snapshot.

    All totals are in the reference currency. Accounts whose currency could
    not be converted are listed in unconverted_accounts and left out.
    """

    reference_currency: str
    accounts: list[Account] = Field(default_factory=list)
    liquid_balance: Decimal = Decimal("0")
    receivables: Decimal = Decimal("0")
    payables: Decimal = Decimal("0")
    unconverted_accounts: list[str] = Field(default_factory=list)
    issues: list[str] = Field(default_factory=list)

    @property
    def net_position(self) -> Decimal:
        """Liquid balance plus what others owe minus what the owner owes."""
        return self.liquid_balance + self.receivables - self.payables
