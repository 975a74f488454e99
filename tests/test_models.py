"""
Tests for the Shared Finance Engine

Test strategy:
1. Unit tests for models (this module)
2. Unit tests for each engine, fed with hand-built ledgers
3. No I/O anywhere: the engines are pure
"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

from finance_engine.models import (
    OWNER_ID,
    Account,
    AccountType,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    CashFlow,
    ConsistencyIssue,
    ConsistencyIssueType,
    ConsistencyReport,
    ExplicitSplit,
    ImplicitSplit,
    Payer,
    Transaction,
    TransactionSplit,
    TransactionType,
    UnsharedExpense,
    participant_key,
)
from finance_engine.money import divide, money_sum, round2


class TestAccountModel:
    """Tests for the Account model."""

    def test_account_creation(self):
        """Test Account model creation."""
        account = Account(
            id="acc-1",
            name="Nubank",
            type=AccountType.CHECKING,
            currency="brl",
            initial_balance=Decimal("1000.00"),
        )
        assert account.currency == "BRL"
        assert account.opening_balance == Decimal("1000.00")
        assert account.is_liquid is True

    def test_opening_balance_falls_back_to_cached_balance(self):
        """Without an initial balance the cached balance is the starting point."""
        account = Account(id="acc-1", balance=Decimal("250.50"))
        assert account.opening_balance == Decimal("250.50")

    def test_opening_balance_defaults_to_zero(self):
        account = Account(id="acc-1")
        assert account.opening_balance == Decimal("0")

    def test_account_is_immutable(self):
        """Accounts are frozen so an engine pass can never alter them."""
        account = Account(id="acc-1")
        with pytest.raises(ValueError):
            account.balance = Decimal("10")

    def test_credit_card_is_not_liquid(self):
        account = Account(id="cc", type=AccountType.CREDIT_CARD)
        assert account.is_liquid is False


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_datetime_is_truncated_to_date(self):
        """ISO datetimes from the data layer keep only the calendar date."""
        tx = Transaction(
            id="t1",
            amount=Decimal("10"),
            type=TransactionType.EXPENSE,
            date="2025-01-10T22:30:00",
        )
        assert tx.date == date(2025, 1, 10)

        tx = Transaction(
            id="t2",
            amount=Decimal("10"),
            type=TransactionType.EXPENSE,
            date=datetime(2025, 3, 1, 8, 0),
        )
        assert tx.date == date(2025, 3, 1)

    def test_amount_may_be_missing(self):
        """Dirty data is accepted; the engines decide what to do with it."""
        tx = Transaction(id="t1", type=TransactionType.INCOME, date=date(2025, 1, 1))
        assert tx.amount is None
        assert tx.has_positive_amount is False

    def test_split_rejects_negative_amount(self):
        """Test that negative split amounts are rejected."""
        with pytest.raises(ValueError):
            TransactionSplit(member_id="bob", assigned_amount=Decimal("-1"))

    def test_over_split_detection(self):
        tx = Transaction(
            id="t1",
            amount=Decimal("100"),
            type=TransactionType.EXPENSE,
            date=date(2025, 1, 1),
            is_shared=True,
            shared_with=[
                TransactionSplit(member_id="bob", assigned_amount=Decimal("70")),
                TransactionSplit(member_id="carla", assigned_amount=Decimal("40")),
            ],
        )
        assert tx.splits_total == Decimal("110.00")
        assert tx.is_over_split is True

    def test_one_cent_over_is_tolerated(self):
        tx = Transaction(
            id="t1",
            amount=Decimal("100"),
            type=TransactionType.EXPENSE,
            date=date(2025, 1, 1),
            shared_with=[
                TransactionSplit(member_id="bob", assigned_amount=Decimal("100.01")),
            ],
        )
        assert tx.is_over_split is False


class TestPayer:
    """Tests for payer resolution."""

    @pytest.mark.parametrize("raw", [None, "", "me", "user"])
    def test_owner_aliases(self, raw):
        """All the data layer's spellings of the primary user resolve to the owner."""
        payer = Payer.from_raw(raw)
        assert payer.is_owner is True
        assert payer.key == OWNER_ID

    def test_member_payer(self):
        payer = Payer.from_raw("bob")
        assert payer.is_owner is False
        assert payer.key == "bob"
        assert payer == Payer.member("bob")

    def test_participant_key(self):
        assert participant_key("me") == OWNER_ID
        assert participant_key("carla") == "carla"


class TestExpenseSplit:
    """Tests for the ExpenseSplit classification."""

    def _expense(self, **overrides) -> Transaction:
        data = {
            "id": "t1",
            "amount": Decimal("100"),
            "type": TransactionType.EXPENSE,
            "date": date(2025, 1, 1),
        }
        data.update(overrides)
        return Transaction(**data)

    def test_plain_expense_is_unshared(self):
        assert isinstance(self._expense().expense_split, UnsharedExpense)

    def test_income_is_unshared(self):
        tx = self._expense(type=TransactionType.INCOME, is_shared=True)
        assert isinstance(tx.expense_split, UnsharedExpense)

    def test_explicit_split(self):
        tx = self._expense(
            is_shared=True,
            payer_id="bob",
            shared_with=[TransactionSplit(member_id="carla", assigned_amount=Decimal("60"))],
        )
        split = tx.expense_split
        assert isinstance(split, ExplicitSplit)
        assert split.payer == Payer.member("bob")
        assert split.splits[0].member_id == "carla"

    def test_implicit_split(self):
        tx = self._expense(is_shared=True)
        split = tx.expense_split
        assert isinstance(split, ImplicitSplit)
        assert split.payer.is_owner

    def test_over_split_falls_back_to_unshared(self):
        tx = self._expense(
            is_shared=True,
            shared_with=[TransactionSplit(member_id="bob", assigned_amount=Decimal("120"))],
        )
        assert isinstance(tx.expense_split, UnsharedExpense)


class TestMoney:
    """Tests for the precision helpers."""

    def test_round2_is_half_up(self):
        assert round2(Decimal("0.125")) == Decimal("0.13")
        assert round2(Decimal("0.135")) == Decimal("0.14")
        assert round2(2.675) == Decimal("2.68")

    def test_money_sum_has_no_float_drift(self):
        assert money_sum([0.1, 0.2]) == Decimal("0.30")

    def test_divide_by_zero(self):
        with pytest.raises(ZeroDivisionError):
            divide(Decimal("10"), 0)


class TestReportModels:
    """Tests for engine result models."""

    def test_consistency_report_counts(self):
        report = ConsistencyReport(issues=[
            ConsistencyIssue(
                transaction_id="t1",
                issue_type=ConsistencyIssueType.INVALID_AMOUNT,
                message="invalid",
                severity="error",
            ),
            ConsistencyIssue(
                transaction_id="t2",
                issue_type=ConsistencyIssueType.CIRCULAR_TRANSFER,
                message="circular",
                severity="warning",
            ),
        ])
        assert report.has_errors is True
        assert report.error_count == 1
        assert report.messages == ["invalid", "circular"]
        assert len(report.for_transaction("t2")) == 1

    def test_issue_severity_is_restricted(self):
        with pytest.raises(ValueError):
            ConsistencyIssue(
                transaction_id="t1",
                issue_type=ConsistencyIssueType.OVER_SPLIT,
                message="x",
                severity="fatal",
            )

    def test_cash_flow_savings_rate(self):
        flow = CashFlow(income=Decimal("1000"), expense=Decimal("800"))
        assert flow.net == Decimal("200")
        assert flow.savings_rate == Decimal("0.2")
        assert CashFlow().savings_rate is None


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.BALANCES_RECONSTRUCTED,
            description="Balances rebuilt",
        )
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        correlation_id = uuid4()
        event = AuditEventBuilder.currency_fallback(
            transaction_id="t9",
            source_currency="USD",
            destination_currency="BRL",
            amount=Decimal("50.00"),
            correlation_id=correlation_id,
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "currency_fallback"
        assert log_dict["severity"] == "critical"
        assert log_dict["entity_id"] == "t9"
        assert log_dict["correlation_id"] == str(correlation_id)
        assert log_dict["details"]["amount"] == "50.00"

    def test_consistency_checked_severity(self):
        assert AuditEventBuilder.consistency_checked(3, 0).severity == AuditSeverity.INFO
        assert AuditEventBuilder.consistency_checked(3, 2).severity == AuditSeverity.WARNING


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
