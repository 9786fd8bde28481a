"""
Ledger Module

This module folds every financial record of a trip into per-person net
balances and per-member spending.

Features:
    - Unifies expenses, bookings and scheduled-activity costs
    - Net balance per person (internal members and external names)
    - Spending (consumption) per internal member
    - Transaction journal ordering and filtering

Balances:
    net = (amounts paid as payer) - (shares attributed)
    Positive = the group owes this person (creditor)
    Negative = this person owes the group (debtor)

    Every settlement-currency amount goes to the payer (+) and to the share
    holders (-), so balances add up to 0 as long as custom shares add up to
    their transaction amounts.

Spending:
    Tracked for internal members only and grows by a member's own share,
    never by the full amount a payer fronted.

Functions:
    collect_transactions: Unify all records of a trip into Transactions.
    aggregate: Fold transactions into balances and spending.
    calculate_balances: collect_transactions + aggregate for a Trip.
    build_journal: Transactions sorted newest first.
    filter_journal: Filter transactions by payer and payment method.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from expenses import Transaction
from splitter import evaluate_split
from utils import to_decimal

logger = logging.getLogger(__name__)

ALL_METHODS = "All"


class LedgerResult:
    """
    Balances and spending computed from a set of transactions.

    Attributes:
        balances (dict[str, float]): Net balance per person.
        spending (dict[str, float]): Consumption per internal member.
    """

    def __init__(self, balances: dict, spending: dict):
        self.balances = balances
        self.spending = spending

    def to_dict(self) -> dict:
        return {
            "balances": dict(self.balances),
            "spending": dict(self.spending)
        }

    def __repr__(self) -> str:
        return f"LedgerResult(balances={self.balances}, spending={self.spending})"


def collect_transactions(trip) -> list[Transaction]:
    """
    Unify the three transaction sources of a trip.

    Sources, in this order:
        1. Expenses (including settlement expenses)
        2. Bookings (an unset amount counts as 0)
        3. Scheduled activity costs per plan day (skipped when no amount
           or no split is set)

    Args:
        trip: Trip snapshot.

    Returns:
        list[Transaction]: One transaction per contributing record.
    """
    transactions = [Transaction.from_expense(e) for e in trip.expenses]
    transactions.extend(Transaction.from_booking(b) for b in trip.bookings)

    for day in trip.plan_days:
        for item in day.scheduled:
            if not item.amount_settlement or item.split is None:
                continue
            transactions.append(Transaction.from_activity(item, day.date))

    return transactions


def aggregate(transactions: Iterable[Transaction], members: list[str]) -> LedgerResult:
    """
    Fold transactions into net balances and member spending.

    Every internal member starts at 0. Other names enter the balances the
    first time they pay or hold a share. The result does not depend on the
    order of transactions, and the inputs are not modified.

    Args:
        transactions: Unified transactions.
        members: Internal members of the trip.

    Returns:
        LedgerResult: Balances per person and spending per internal member.
    """
    balances = {member: Decimal("0") for member in members}
    spending = {member: Decimal("0") for member in members}

    for transaction in transactions:
        result = evaluate_split(transaction.amount_settlement, transaction.split, members)

        # No payer or no policy: the record moves no money
        if result.is_empty:
            logger.debug("Skipping transaction %s without payer", transaction.transaction_id)
            continue

        amount = to_decimal(transaction.amount_settlement)
        balances[result.payer] = balances.get(result.payer, Decimal("0")) + amount

        for person, share in result.shares.items():
            balances[person] = balances.get(person, Decimal("0")) - share
            if person in spending:
                spending[person] += share

    return LedgerResult(
        balances={person: float(value) for person, value in balances.items()},
        spending={member: float(value) for member, value in spending.items()}
    )


def calculate_balances(trip) -> LedgerResult:
    """Compute balances and spending for a whole trip snapshot."""
    result = aggregate(collect_transactions(trip), trip.members)
    logger.info(
        "Computed balances for trip %s across %d people",
        trip.trip_id, len(result.balances)
    )
    return result


def build_journal(trip) -> list[Transaction]:
    """
    Return the trip's transactions newest first.

    Transactions without a date sort last. Ties keep source order.
    """
    return sorted(collect_transactions(trip), key=lambda t: t.date or "", reverse=True)


def filter_journal(
    transactions: Iterable[Transaction],
    member: Optional[str] = None,
    payment_method: str = ALL_METHODS
) -> list[Transaction]:
    """
    Filter journal transactions.

    Args:
        transactions: Transactions to filter.
        member: Keep only transactions paid by this person (None = everyone).
        payment_method: "Cash", "Credit Card" or "All".

    Returns:
        list[Transaction]: Matching transactions in input order.
    """
    filtered = []
    for transaction in transactions:
        if member and transaction.payer != member:
            continue
        if payment_method != ALL_METHODS and transaction.payment_method != payment_method:
            continue
        filtered.append(transaction)
    return filtered
