"""
Tests for the debt settlement solver.
"""

import pytest

from ledger import calculate_balances
from recorder import apply_settlement
from settlement import SettlementTransfer, optimize_settlements


class TestOptimizeSettlements:
    """Tests for optimize_settlements."""

    def test_two_debtors_one_creditor(self):
        transfers = optimize_settlements({"A": -50, "B": -30, "C": 80})

        assert transfers == [
            SettlementTransfer("A", "C", 50),
            SettlementTransfer("B", "C", 30),
        ]
        assert sum(t.amount for t in transfers) == pytest.approx(80.0)
        assert all(t.amount > 0 for t in transfers)

    def test_largest_debtor_meets_largest_creditor(self):
        transfers = optimize_settlements({"A": 70, "B": -100, "C": 30})
        assert [t.to_dict() for t in transfers] == [
            {"from": "B", "to": "A", "amount": 70.0},
            {"from": "B", "to": "C", "amount": 30.0},
        ]

    def test_transfer_count_bound(self):
        balances = {"A": -10, "B": -20, "C": -30, "D": 25, "E": 35}
        transfers = optimize_settlements(balances)
        assert len(transfers) <= 3 + 2 - 1
        assert sum(t.amount for t in transfers) == pytest.approx(60.0)

    def test_tolerance_band_is_settled(self):
        assert optimize_settlements({"A": 0.005, "B": -0.005}) == []
        assert optimize_settlements({"A": 0.01, "B": -0.01}) == []

    def test_empty_and_all_zero(self):
        assert optimize_settlements({}) == []
        assert optimize_settlements({"A": 0, "B": 0}) == []

    def test_ties_keep_balance_order(self):
        transfers = optimize_settlements({"B": -10, "A": -10, "C": 20})
        assert [t.from_person for t in transfers] == ["B", "A"]

    def test_input_not_modified(self):
        balances = {"A": -50, "B": -30, "C": 80}
        optimize_settlements(balances)
        assert balances == {"A": -50, "B": -30, "C": 80}

    def test_trip_transfers(self, trip):
        transfers = optimize_settlements(calculate_balances(trip).balances)
        assert [(t.from_person, t.to_person) for t in transfers] == [
            ("Bob", "Carol"),
            ("Alice", "Carol"),
            ("Dave", "Carol"),
        ]
        assert [t.amount for t in transfers] == pytest.approx([360.0, 220.0, 100.0])


class TestSettlementConvergence:
    """Recording every transfer settles the whole trip."""

    def test_all_balances_cleared(self, trip):
        for transfer in optimize_settlements(calculate_balances(trip).balances):
            trip = apply_settlement(trip, transfer, date="2025-04-06")

        for person, balance in calculate_balances(trip).balances.items():
            assert abs(balance) < 0.01, person
        assert optimize_settlements(calculate_balances(trip).balances) == []

    def test_uneven_thirds_converge(self, members):
        from trips import Trip

        trip = Trip.from_dict({
            "members": members,
            "expenses": [
                {"expense_id": "E1", "amount_settlement": 100, "split": {"method": "Equally", "payer": "Alice"}},
                {"expense_id": "E2", "amount_settlement": 10, "split": {"method": "Equally", "payer": "Bob"}},
            ],
        })

        for transfer in optimize_settlements(calculate_balances(trip).balances):
            trip = apply_settlement(trip, transfer)

        for balance in calculate_balances(trip).balances.values():
            assert abs(balance) < 0.01
