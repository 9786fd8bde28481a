"""
Splitter Module

This module turns one transaction's settlement amount and split policy into
the shares each person owes.

Features:
    - Equal splitting across all internal members
    - Sole-payer attribution
    - Custom per-person shares (internal or external names)
    - Custom-share mismatch detection

Rules:
    Equally - amount / max(1, len(members)) for every internal member,
              payer included. External names get nothing.
    Solely  - the payer owes the full amount.
    Custom  - each named person owes their entered share. The shares are
              used as entered even when they do not add up to the amount.

    A missing policy or a policy without a payer produces no shares at all.

Functions:
    evaluate_split: Compute the payer and per-person shares of a transaction.
    custom_share_total: Sum of a custom policy's settlement-currency shares.
    custom_share_mismatch: Deviation of custom shares from the amount, if large.
"""

from decimal import Decimal
from typing import Optional

from expenses import Custom, Equally, Solely, SplitPolicy
from utils import to_decimal


# Custom shares may drift from the total by this much before a warning
SHARE_MISMATCH_WARNING = Decimal("0.5")


class SplitResult:
    """
    Outcome of evaluating one split policy.

    Attributes:
        payer (str | None): Who fronted the money (contribution side).
        shares (dict[str, Decimal]): Who consumed it (consumption side).
    """

    def __init__(self, payer: Optional[str] = None, shares: Optional[dict] = None):
        self.payer = payer
        self.shares = shares or {}

    @property
    def is_empty(self) -> bool:
        return self.payer is None

    def as_floats(self) -> dict:
        return {person: float(share) for person, share in self.shares.items()}

    def __repr__(self) -> str:
        return f"SplitResult(payer={self.payer!r}, shares={self.as_floats()})"


def evaluate_split(amount, policy: Optional[SplitPolicy], members: list[str]) -> SplitResult:
    """
    Compute who paid and what each person owes for one transaction.

    Args:
        amount: Transaction amount in settlement currency.
        policy: The transaction's split policy (None = empty).
        members: Internal members of the trip, used only by Equally.

    Returns:
        SplitResult: Payer and share per person. Empty when the policy is
            missing or names no payer.
    """
    if policy is None or not policy.payer:
        return SplitResult()

    amount = to_decimal(amount)

    if isinstance(policy, Equally):
        # An empty roster divides by 1 instead of 0
        per_person = amount / Decimal(max(1, len(members)))
        return SplitResult(policy.payer, {member: per_person for member in members})

    if isinstance(policy, Solely):
        return SplitResult(policy.payer, {policy.payer: amount})

    if isinstance(policy, Custom):
        shares = {
            person: to_decimal(share)
            for person, share in policy.custom_shares.items()
        }
        return SplitResult(policy.payer, shares)

    return SplitResult()


def custom_share_total(policy: Optional[SplitPolicy]) -> Decimal:
    """Sum of the settlement-currency shares of a Custom policy (0 otherwise)."""
    if not isinstance(policy, Custom):
        return Decimal("0")
    return sum((to_decimal(share) for share in policy.custom_shares.values()), Decimal("0"))


def custom_share_mismatch(amount, policy: Optional[SplitPolicy]) -> Optional[float]:
    """
    Check whether custom shares add up to the transaction amount.

    Advisory only: the evaluator never corrects the shares.

    Args:
        amount: Transaction amount in settlement currency.
        policy: Split policy of the transaction.

    Returns:
        float | None: amount - sum(shares) when the gap exceeds
            SHARE_MISMATCH_WARNING, otherwise None. Non-custom policies
            always return None.
    """
    if not isinstance(policy, Custom):
        return None

    difference = to_decimal(amount) - custom_share_total(policy)
    if abs(difference) > SHARE_MISMATCH_WARNING:
        return float(difference)
    return None
