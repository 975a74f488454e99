"""
Tests for Financial Health and Shared-Expense Positions
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from finance_engine.config import EngineSettings
from finance_engine.engines import (
    assess_health,
    classify_health,
    effective_transaction_value,
    summarize_cash_flow,
    total_payables,
    total_receivables,
)
from finance_engine.models import (
    HealthStatus,
    Transaction,
    TransactionSplit,
    TransactionType,
)


def make_tx(amount: str = "100", **overrides) -> Transaction:
    data = {
        "id": str(uuid4()),
        "amount": Decimal(amount),
        "type": TransactionType.EXPENSE,
        "date": date(2025, 4, 10),
        "account_id": "acc-1",
    }
    data.update(overrides)
    return Transaction(**data)


def share(member_id: str, amount: str, settled: bool = False) -> TransactionSplit:
    return TransactionSplit(
        member_id=member_id,
        assigned_amount=Decimal(amount),
        is_settled=settled,
    )


class TestClassifyHealth:
    """Savings-rate classification."""

    @pytest.mark.parametrize("income,expense,expected", [
        (0, 0, HealthStatus.POSITIVE),
        (0, 1, HealthStatus.CRITICAL),
        (1000, 1001, HealthStatus.CRITICAL),
        (1000, 1000, HealthStatus.WARNING),
        (1000, 901, HealthStatus.WARNING),
        (1000, 900, HealthStatus.POSITIVE),
        (1000, 0, HealthStatus.POSITIVE),
        ("2500.50", "100.25", HealthStatus.POSITIVE),
    ])
    def test_boundaries(self, income, expense, expected):
        assert classify_health(income, expense) == expected

    def test_floats_do_not_drift_across_the_boundary(self):
        """0.1 of 1.0 saved is exactly the warning rate, hence POSITIVE."""
        assert classify_health(1.0, 0.9) == HealthStatus.POSITIVE

    def test_warning_rate_is_configurable(self):
        settings = EngineSettings(health_warning_savings_rate=Decimal("0.25"))
        assert classify_health(1000, 800, settings) == HealthStatus.WARNING
        assert classify_health(1000, 750, settings) == HealthStatus.POSITIVE


class TestCashFlow:
    """Income and expense totals for a window."""

    def test_basic_totals(self):
        txs = [
            make_tx("3000", type=TransactionType.INCOME),
            make_tx("1200"),
            make_tx("500", type=TransactionType.TRANSFER, destination_account_id="acc-2"),
        ]
        flow = summarize_cash_flow(txs)
        assert flow.income == Decimal("3000.00")
        assert flow.expense == Decimal("1200.00")

    def test_date_window_is_inclusive(self):
        txs = [
            make_tx("10", date=date(2025, 4, 1)),
            make_tx("20", date=date(2025, 4, 30)),
            make_tx("40", date=date(2025, 5, 1)),
        ]
        flow = summarize_cash_flow(txs, date(2025, 4, 1), date(2025, 4, 30))
        assert flow.expense == Decimal("30.00")

    def test_refunds_reduce_expense(self):
        txs = [
            make_tx("100"),
            make_tx("30", is_refund=True),
            make_tx("20", type=TransactionType.INCOME, is_refund=True),
        ]
        flow = summarize_cash_flow(txs)
        assert flow.expense == Decimal("50.00")
        assert flow.income == Decimal("0")

    def test_unpaid_debt_to_member_is_not_an_expense_yet(self):
        txs = [make_tx("40", payer_id="bob", is_shared=True, account_id=None)]
        assert summarize_cash_flow(txs).expense == Decimal("0")

    def test_settled_debt_to_member_counts(self):
        txs = [make_tx("40", payer_id="bob", is_shared=True, is_settled=True, account_id=None)]
        assert summarize_cash_flow(txs).expense == Decimal("40.00")

    def test_assess_health(self):
        txs = [
            make_tx("1000", type=TransactionType.INCOME),
            make_tx("950"),
            make_tx("500", deleted=True),
        ]
        assert assess_health(txs) == HealthStatus.WARNING


class TestEffectiveValue:
    """The owner's real cost of a transaction."""

    def test_unshared_expense(self):
        assert effective_transaction_value(make_tx("100")) == Decimal("100")

    def test_owner_paid_split(self):
        tx = make_tx("100", is_shared=True, shared_with=[share("bob", "50")])
        assert effective_transaction_value(tx) == Decimal("50.00")

    def test_member_paid_split(self):
        tx = make_tx(
            "100",
            payer_id="bob",
            is_shared=True,
            shared_with=[share("bob", "60")],
        )
        assert effective_transaction_value(tx) == Decimal("40.00")

    def test_over_split_counts_in_full(self):
        tx = make_tx("100", is_shared=True, shared_with=[share("bob", "150")])
        assert effective_transaction_value(tx) == Decimal("100")

    @pytest.mark.parametrize("payer_id", [None, "bob"])
    def test_split_one_cent_above_amount_is_never_negative(self, payer_id):
        tx = make_tx("100", payer_id=payer_id, is_shared=True, shared_with=[share("carla", "100.01")])
        value = effective_transaction_value(tx)
        assert value == Decimal("100")
        assert value >= 0

    def test_split_equal_to_amount_costs_nothing(self):
        tx = make_tx("100", is_shared=True, shared_with=[share("bob", "100")])
        assert effective_transaction_value(tx) == Decimal("0")

    def test_income_counts_in_full(self):
        tx = make_tx("100", type=TransactionType.INCOME)
        assert effective_transaction_value(tx) == Decimal("100")

    def test_missing_amount_is_zero(self):
        tx = make_tx("100").model_copy(update={"amount": None})
        assert effective_transaction_value(tx) == Decimal("0")


class TestReceivablesAndPayables:
    """What others owe the owner and what the owner owes others."""

    def test_receivables_sum_unsettled_shares(self):
        txs = [
            make_tx("100", is_shared=True, shared_with=[share("bob", "50")]),
            make_tx("100", is_shared=True, shared_with=[
                share("bob", "20", settled=True),
                share("carla", "30"),
            ]),
        ]
        assert total_receivables(txs) == Decimal("80.00")

    def test_receivables_ignore_member_paid_and_accountless(self):
        txs = [
            make_tx("100", payer_id="bob", is_shared=True, shared_with=[share("carla", "50")]),
            make_tx("100", account_id=None, is_shared=True, shared_with=[share("bob", "50")]),
        ]
        assert total_receivables(txs) == Decimal("0")

    def test_receivables_apply_exchange_rate(self):
        txs = [make_tx(
            "100",
            is_shared=True,
            shared_with=[share("bob", "10")],
            exchange_rate=Decimal("5.5"),
        )]
        assert total_receivables(txs) == Decimal("55.00")

    def test_payables(self):
        txs = [
            make_tx("40", payer_id="bob", is_shared=True),
            make_tx("15", payer_id="carla", is_shared=True, is_settled=True),
            make_tx("99", payer_id="carla", is_shared=True, currency="usd"),
            make_tx("70"),
        ]
        assert total_payables(txs) == Decimal("40.00")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
