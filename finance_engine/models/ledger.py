"""
Core Ledger Models

These models define the accounts and transactions the engines read.
They are designed to:
1. Enforce type safety at the boundary with the caller's data layer
2. Stay immutable (frozen) so an engine pass can never alter caller data
3. Tolerate dirty ledger data (missing or non-positive amounts) so the
   engines can degrade gracefully instead of refusing to compute

DESIGN DECISION: The "primary user" is never a magic string inside the
engines. Raw payer ids are resolved once into a Payer, and the combination
of is_shared / shared_with / payer_id is resolved once into an ExpenseSplit
variant. The engines branch on those types only.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from finance_engine.money import TOLERANCE, ZERO, money_sum

# Key under which the primary account holder is tracked in settlement balances
OWNER_ID = "user"

# Raw ids the data layer uses for the primary account holder
OWNER_ALIASES = frozenset({"", "me", "user"})

# Placeholder account id for money that lives outside the ledger
EXTERNAL_ACCOUNT_ID = "EXTERNAL"


def participant_key(member_id: Optional[str]) -> str:
    """Map a raw member/payer id to its settlement balance key."""
    if member_id is None or member_id.strip() in OWNER_ALIASES:
        return OWNER_ID
    return member_id


# =============================================================================
# ENUMS
# =============================================================================

class AccountType(str, Enum):
    """Supported account kinds."""
    CHECKING = "checking"
    SAVINGS = "savings"
    CASH = "cash"
    CREDIT_CARD = "credit_card"
    INVESTMENT = "investment"


# Accounts that count as available cash
LIQUID_ACCOUNT_TYPES = frozenset({
    AccountType.CHECKING,
    AccountType.SAVINGS,
    AccountType.CASH,
})


class TransactionType(str, Enum):
    """
    Transaction kinds.

    The amount of every type is expressed in the currency of the source
    account; only TRANSFER may carry a second amount for its destination.
    """
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


# =============================================================================
# ACCOUNTS
# =============================================================================

class Account(BaseModel):
    """
    An account snapshot supplied by the caller.

    balance is the last cached value; the balance engine supersedes it by
    returning a copy with the reconstructed figure.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1, description="Account identifier")
    name: str = Field(default="", description="Display name")
    type: AccountType = Field(default=AccountType.CHECKING)
    currency: str = Field(
        default="BRL",
        min_length=3,
        max_length=3,
        description="ISO 4217 currency code",
    )
    initial_balance: Optional[Decimal] = Field(
        default=None,
        description="Opening balance at ledger start",
    )
    balance: Decimal = Field(
        default=ZERO,
        description="Last known balance (superseded by reconstruction)",
    )

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.upper()

    @property
    def opening_balance(self) -> Decimal:
        """Balance the ledger replay starts from."""
        if self.initial_balance is not None:
            return self.initial_balance
        return self.balance if self.balance is not None else ZERO

    @property
    def is_liquid(self) -> bool:
        return self.type in LIQUID_ACCOUNT_TYPES


# =============================================================================
# PAYER & SPLITS
# =============================================================================

class Payer(BaseModel):
    """
    Who actually paid for a transaction.

    member_id is None for the primary account holder.
    """
    model_config = ConfigDict(frozen=True)

    member_id: Optional[str] = None

    @classmethod
    def owner(cls) -> "Payer":
        return cls()

    @classmethod
    def member(cls, member_id: str) -> "Payer":
        if participant_key(member_id) == OWNER_ID:
            return cls()
        return cls(member_id=member_id)

    @classmethod
    def from_raw(cls, payer_id: Optional[str]) -> "Payer":
        """Resolve a raw payer id; absent, "me" and "user" all mean the owner."""
        if payer_id is None:
            return cls()
        return cls.member(payer_id)

    @property
    def is_owner(self) -> bool:
        return self.member_id is None

    @property
    def key(self) -> str:
        """Settlement balance key for this payer."""
        return OWNER_ID if self.member_id is None else self.member_id


class TransactionSplit(BaseModel):
    """The share of a shared expense assigned to one member."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    member_id: str = Field(..., min_length=1)
    assigned_amount: Decimal = Field(..., ge=0)
    percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    is_settled: bool = Field(
        default=False,
        description="Has this member already paid their share back?",
    )


class UnsharedExpense(BaseModel):
    """A transaction with no settlement effect."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["unshared"] = "unshared"


class ExplicitSplit(BaseModel):
    """A shared expense with per-member assigned amounts."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["explicit"] = "explicit"
    payer: Payer
    splits: tuple[TransactionSplit, ...]


class ImplicitSplit(BaseModel):
    """A shared expense split evenly across everyone (legacy records)."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["implicit"] = "implicit"
    payer: Payer


ExpenseSplit = Union[UnsharedExpense, ExplicitSplit, ImplicitSplit]


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Transaction(BaseModel):
    """
    A single ledger entry.

    Fields are deliberately permissive (amount may be missing or
    non-positive, account ids may dangle). The consistency checker reports
    such records; the engines skip or fall back on them.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    amount: Optional[Decimal] = Field(
        default=None,
        description="Amount in the source account currency",
    )
    type: TransactionType
    date: dt.date = Field(..., description="Calendar date of the transaction")
    description: str = Field(default="", max_length=500)

    account_id: Optional[str] = Field(default=None, description="Source account")
    destination_account_id: Optional[str] = None
    destination_amount: Optional[Decimal] = Field(
        default=None,
        description="Amount arriving at the destination (transfers)",
    )
    currency: Optional[str] = None
    exchange_rate: Optional[Decimal] = None

    trip_id: Optional[str] = None
    payer_id: Optional[str] = Field(
        default=None,
        description="Who paid; absent or 'me' means the primary user",
    )
    is_shared: bool = False
    shared_with: list[TransactionSplit] = Field(default_factory=list)

    is_refund: bool = False
    is_settled: bool = False
    settled_at: Optional[dt.datetime] = None
    deleted: bool = False

    @field_validator("date", mode="before")
    @classmethod
    def truncate_to_date(cls, v):
        """Accept datetimes and ISO datetime strings; keep the calendar date."""
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v

    @property
    def payer(self) -> Payer:
        return Payer.from_raw(self.payer_id)

    @property
    def paid_by_member(self) -> bool:
        """True when someone other than the primary user paid."""
        return not self.payer.is_owner

    @property
    def has_source_account(self) -> bool:
        """An account_id is set and is not the external placeholder."""
        source = (self.account_id or "").strip()
        return bool(source) and source != EXTERNAL_ACCOUNT_ID

    @property
    def has_positive_amount(self) -> bool:
        return self.amount is not None and self.amount > 0

    @property
    def splits_total(self) -> Decimal:
        return money_sum(s.assigned_amount for s in self.shared_with)

    @property
    def is_over_split(self) -> bool:
        """Assigned splits exceed the transaction amount (beyond one cent)."""
        if not self.shared_with:
            return False
        amount = self.amount if self.amount is not None else ZERO
        return self.splits_total > amount + TOLERANCE

    @property
    def expense_split(self) -> ExpenseSplit:
        """
        Resolve how this transaction is shared.

        Over-split records fall back to UnsharedExpense so the whole amount
        is treated as the effective cost.
        """
        if self.type != TransactionType.EXPENSE:
            return UnsharedExpense()
        if self.shared_with:
            if self.is_over_split:
                return UnsharedExpense()
            return ExplicitSplit(payer=self.payer, splits=tuple(self.shared_with))
        if self.is_shared:
            return ImplicitSplit(payer=self.payer)
        return UnsharedExpense()


class TripParticipant(BaseModel):
    """A member taking part in a trip or shared group (never the owner)."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
