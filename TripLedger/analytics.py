"""
Analytics Module

This module provides the summary and transparency views over a trip's
ledger.

Features:
    - Total trip spend and per-source breakdown
    - Per-payer totals (money fronted)
    - Per-member spending (money consumed)
    - Data-quality warnings
    - Per-member share explanations

Warnings generated (rule-based, advisory only):
    - Custom shares deviate from the transaction amount by more than 0.5
    - One payer fronted > 40% of the non-settlement trip spend

Functions:
    generate_analytics: Build the summary and warnings for a trip.
    explain_member_share: Break down how one person's balance came about.
    explain_all_members: Explanations for every known person.
"""

import logging
from collections import defaultdict
from decimal import Decimal

from ledger import calculate_balances, collect_transactions
from splitter import custom_share_mismatch, evaluate_split
from utils import format_currency, round_for_display, to_decimal

logger = logging.getLogger(__name__)


PAYER_SHARE_WARNING = Decimal("40")


def generate_analytics(trip, ledger_result=None) -> dict:
    """
    Generate the summary and warnings for a trip.

    Args:
        trip: Trip snapshot.
        ledger_result: Precomputed LedgerResult (computed when omitted).

    Returns:
        dict: Contains two keys:
            - analytics: dict with total_spend, source_breakdown,
                         payer_totals, spending_by_member
            - warnings: list of warning strings

    Notes:
        - total_spend includes settlement expenses
        - Warnings never stop the computation
    """
    if ledger_result is None:
        ledger_result = calculate_balances(trip)

    currency = trip.settlement_currency
    transactions = collect_transactions(trip)

    source_totals = defaultdict(Decimal)
    payer_totals = defaultdict(Decimal)
    total_spend = Decimal("0")
    fronted_total = Decimal("0")
    warnings = []

    for transaction in transactions:
        amount = to_decimal(transaction.amount_settlement)
        total_spend += amount
        source_totals[transaction.category] += amount

        if transaction.payer and not transaction.is_settlement:
            payer_totals[transaction.payer] += amount
            fronted_total += amount

        mismatch = custom_share_mismatch(amount, transaction.split)
        if mismatch is not None:
            logger.warning(
                "Custom shares of %s differ from total by %s",
                transaction.transaction_id, mismatch
            )
            warnings.append(
                f"Warning: custom shares for '{transaction.description or transaction.transaction_id}' "
                f"differ from the total by {format_currency(abs(mismatch), currency)}"
            )

    if fronted_total > 0:
        for payer, amount in payer_totals.items():
            percentage = amount / fronted_total * 100
            if percentage > PAYER_SHARE_WARNING:
                warnings.append(
                    f"Warning: {payer} paid {round_for_display(percentage)}% of trip expenses "
                    f"({format_currency(amount, currency)} of {format_currency(fronted_total, currency)})"
                )

    analytics = {
        "total_spend": float(total_spend),
        "source_breakdown": {k: float(v) for k, v in source_totals.items()},
        "payer_totals": {k: float(v) for k, v in payer_totals.items()},
        "spending_by_member": dict(ledger_result.spending)
    }

    return {
        "analytics": analytics,
        "warnings": warnings
    }


def explain_member_share(person: str, trip, ledger_result=None) -> dict:
    """
    Generate a breakdown of how one person's balance was calculated.

    For each transaction the person paid for or holds a share of:
        - Shows transaction details (id, description, category, date, amount)
        - Shows the split method and payer
        - Shows the amount the person paid and their share

    Args:
        person: Member or external name to explain.
        trip: Trip snapshot.
        ledger_result: Precomputed LedgerResult (computed when omitted).

    Returns:
        dict: Explanation containing:
            - person: string
            - contributions: list of per-transaction dicts
            - total_paid: float
            - total_share: float
            - net_balance: float (from the ledger)
    """
    if ledger_result is None:
        ledger_result = calculate_balances(trip)

    contributions = []
    total_paid = Decimal("0")
    total_share = Decimal("0")

    for transaction in collect_transactions(trip):
        result = evaluate_split(transaction.amount_settlement, transaction.split, trip.members)
        if result.is_empty:
            continue

        paid = to_decimal(transaction.amount_settlement) if result.payer == person else Decimal("0")
        share = result.shares.get(person, Decimal("0"))
        if paid == 0 and share == 0:
            continue

        contributions.append({
            "transaction_id": transaction.transaction_id,
            "description": transaction.description,
            "category": transaction.category,
            "date": transaction.date,
            "total_amount": round_for_display(transaction.amount_settlement),
            "method": transaction.split.method,
            "payer": result.payer,
            "paid": round_for_display(paid),
            "share": round_for_display(share)
        })
        total_paid += paid
        total_share += share

    return {
        "person": person,
        "contributions": contributions,
        "total_paid": round_for_display(total_paid),
        "total_share": round_for_display(total_share),
        "net_balance": ledger_result.balances.get(person, 0.0)
    }


def explain_all_members(trip, ledger_result=None) -> list[dict]:
    """
    Generate explanations for everyone in the balance sheet.

    Includes all internal members (even those with no transactions) and
    every other name that appears in the balances, in balance order.
    """
    if ledger_result is None:
        ledger_result = calculate_balances(trip)

    return [
        explain_member_share(person, trip, ledger_result)
        for person in ledger_result.balances
    ]
