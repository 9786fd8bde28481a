"""
Recorder Module

This module turns an accepted settlement transfer into a ledger record.

A recorded settlement is an ordinary Expense flagged with is_settlement.
Its Custom split has the debtor as payer and the creditor as the only share
holder, so the next balance computation credits the debtor and debits the
creditor by exactly the transferred amount.

Functions:
    record_settlement: Build the settlement expense for one transfer.
    apply_settlement: Return a new trip snapshot with the settlement appended.
"""

import logging
from datetime import date as date_cls
from typing import Optional

from config.settings import get_settings
from expenses import Custom, Expense, PAYMENT_CASH
from utils import generate_id, to_float

logger = logging.getLogger(__name__)


def record_settlement(
    from_person: str,
    to_person: str,
    amount: float,
    date: Optional[str] = None,
    settlement_currency: Optional[str] = None
) -> Expense:
    """
    Build the synthetic expense that records a settlement transfer.

    The transfer is not checked against current balances; any amount is
    recorded as given.

    Args:
        from_person: Debtor who pays.
        to_person: Creditor who receives.
        amount: Amount in settlement currency.
        date: Date of the payment (YYYY-MM-DD). Defaults to today.
        settlement_currency: Currency code stored on the record. Defaults to
            the configured settlement currency.

    Returns:
        Expense: Settlement expense with a one-share Custom split.
    """
    amount = to_float(amount)
    currency = settlement_currency or get_settings().SETTLEMENT_CURRENCY

    expense = Expense(
        expense_id=generate_id(),
        description=f"Settlement: {from_person} -> {to_person}",
        amount_local=amount,
        exchange_rate=1.0,
        amount_settlement=amount,
        currency=currency,
        payment_method=PAYMENT_CASH,
        split=Custom(
            from_person,
            custom_shares={to_person: amount},
            custom_local_shares={to_person: amount}
        ),
        is_settlement=True,
        date=date or date_cls.today().isoformat()
    )

    logger.info("Recorded settlement %s -> %s of %s %s", from_person, to_person, amount, currency)
    return expense


def apply_settlement(trip, transfer, date: Optional[str] = None):
    """
    Record a transfer and append it to a copy of the trip.

    Args:
        trip: Trip snapshot (left untouched).
        transfer: SettlementTransfer to record.
        date: Optional payment date.

    Returns:
        Trip: New snapshot with the settlement expense appended.
    """
    expense = record_settlement(
        transfer.from_person,
        transfer.to_person,
        transfer.amount,
        date=date,
        settlement_currency=trip.settlement_currency
    )
    return trip.with_expense(expense)
