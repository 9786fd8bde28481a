"""
Settlement Module

This module handles the settlement calculations for the trip ledger.

Features:
    - Convert net balances into settlement transfers
    - Minimize number of transfers using greedy algorithm
    - Ignore balances inside the settled tolerance band

Data Model:
    Input - balances (dict keyed by person name):
        - net balance: float (positive = owed money, negative = owes money)

    Output - list of SettlementTransfer:
        - from_person: string (debtor who pays)
        - to_person: string (creditor who receives)
        - amount: float (positive, settlement currency)

Functions:
    optimize_settlements: Convert balances into greedy settlement transfers.
"""

import logging
from decimal import Decimal

from utils import to_decimal, to_float

logger = logging.getLogger(__name__)


# Balances within this band are settled
BALANCE_EPSILON = Decimal("0.01")


class SettlementTransfer:
    """
    A recommended payment from one debtor to one creditor.

    Attributes:
        from_person (str): Debtor who pays.
        to_person (str): Creditor who receives.
        amount (float): Positive amount in settlement currency.
    """

    def __init__(self, from_person: str, to_person: str, amount: float):
        self.from_person = from_person
        self.to_person = to_person
        self.amount = to_float(amount)

    def to_dict(self) -> dict:
        return {
            "from": self.from_person,
            "to": self.to_person,
            "amount": self.amount
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, SettlementTransfer):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"SettlementTransfer({self.from_person!r} -> {self.to_person!r}, {self.amount})"


def optimize_settlements(balances: dict) -> list[SettlementTransfer]:
    """
    Convert net balances into settlement transfers.

    Uses a greedy algorithm:
        1. Separate people into debtors (balance < -0.01) and creditors
           (balance > 0.01)
        2. Sort debtors by largest debt first
        3. Sort creditors by largest credit first
        4. Iteratively match the current debtor with the current creditor:
           - Transfer the minimum of their remaining amounts
           - Record it when it exceeds 0.01
           - Advance whichever side dropped below 0.01
        5. Stop when either list is exhausted

    Args:
        balances: Net balance per person.

    Returns:
        list[SettlementTransfer]: Transfers in the order they were produced.

    Notes:
        - Equal amounts keep the order of the balances mapping
        - Amounts are not rounded
        - Does NOT modify input balances
    """
    # Amounts stored as positive magnitudes for both sides
    debtors = []
    creditors = []

    for person, balance in balances.items():
        net = to_decimal(balance)

        if net < -BALANCE_EPSILON:
            debtors.append([person, -net])
        elif net > BALANCE_EPSILON:
            creditors.append([person, net])

    debtors.sort(key=lambda x: x[1], reverse=True)
    creditors.sort(key=lambda x: x[1], reverse=True)

    transfers = []
    debtor_idx = 0
    creditor_idx = 0

    while debtor_idx < len(debtors) and creditor_idx < len(creditors):
        debtor, debt_amount = debtors[debtor_idx]
        creditor, credit_amount = creditors[creditor_idx]

        amount = min(debt_amount, credit_amount)

        # Skip rounding leftovers
        if amount > BALANCE_EPSILON:
            transfers.append(SettlementTransfer(debtor, creditor, amount))

        debtors[debtor_idx][1] = debt_amount - amount
        creditors[creditor_idx][1] = credit_amount - amount

        if debtors[debtor_idx][1] < BALANCE_EPSILON:
            debtor_idx += 1
        if creditors[creditor_idx][1] < BALANCE_EPSILON:
            creditor_idx += 1

    logger.info(
        "Settled %d debtors and %d creditors with %d transfers",
        len(debtors), len(creditors), len(transfers)
    )
    return transfers
