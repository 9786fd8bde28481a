"""
Tests for recording settlement transfers.
"""

from datetime import date

import pytest

from expenses import Custom
from ledger import build_journal, calculate_balances
from recorder import apply_settlement, record_settlement
from settlement import SettlementTransfer


class TestRecordSettlement:
    """Tests for record_settlement."""

    def test_settlement_expense_shape(self):
        expense = record_settlement("Bob", "Carol", 360, date="2025-04-05")

        assert expense.is_settlement is True
        assert isinstance(expense.split, Custom)
        assert expense.split.payer == "Bob"
        assert expense.split.custom_shares == {"Carol": 360.0}
        assert expense.split.custom_local_shares == {"Carol": 360.0}
        assert expense.amount_settlement == 360.0
        assert expense.amount_local == 360.0
        assert expense.exchange_rate == 1.0
        assert expense.payment_method == "Cash"
        assert expense.description == "Settlement: Bob -> Carol"
        assert expense.date == "2025-04-05"
        assert expense.expense_id

    def test_defaults(self):
        expense = record_settlement("Bob", "Carol", 10)
        assert expense.date == date.today().isoformat()
        assert expense.currency == "HKD"

    def test_ids_are_unique(self):
        first = record_settlement("Bob", "Carol", 10)
        second = record_settlement("Bob", "Carol", 10)
        assert first.expense_id != second.expense_id


class TestApplySettlement:
    """Tests for appending a settlement to a trip."""

    def test_balances_move_by_amount(self, trip, expected_balances):
        updated = apply_settlement(trip, SettlementTransfer("Bob", "Carol", 100))
        balances = calculate_balances(updated).balances

        assert abs(balances["Bob"]) == pytest.approx(abs(expected_balances["Bob"]) - 100)
        assert abs(balances["Carol"]) == pytest.approx(abs(expected_balances["Carol"]) - 100)
        assert balances["Alice"] == pytest.approx(expected_balances["Alice"])
        assert balances["Dave"] == pytest.approx(expected_balances["Dave"])

    def test_spending_is_unchanged_for_debtor(self, trip):
        """A settlement is not consumption by the debtor."""
        before = calculate_balances(trip).spending
        after = calculate_balances(apply_settlement(trip, SettlementTransfer("Bob", "Carol", 100))).spending
        assert after["Bob"] == pytest.approx(before["Bob"])

    def test_original_trip_untouched(self, trip):
        updated = apply_settlement(trip, SettlementTransfer("Bob", "Carol", 100))
        assert len(trip.expenses) == 3
        assert len(updated.expenses) == 4
        assert updated.expenses[-1].currency == trip.settlement_currency

    def test_settlement_shows_in_journal(self, trip):
        updated = apply_settlement(trip, SettlementTransfer("Bob", "Carol", 100), date="2025-04-10")
        newest = build_journal(updated)[0]
        assert newest.is_settlement
        assert newest.category == "Settlement"
        assert newest.payer == "Bob"
