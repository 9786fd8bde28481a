"""
Currency Module

This module keeps local-currency amounts, exchange rates and settlement-
currency amounts consistent for the trip ledger.

Features:
    - Three-field conversion value (local amount, rate, settlement amount)
    - Editing any field recomputes the others
    - Per-person custom share conversion
    - Non-numeric input treated as 0

Invariant:
    settlement = local * rate

    Editing the settlement amount back-solves the rate while holding the
    local amount fixed. When the local amount is 0 the rate is undefined, so
    it is left unchanged.

Functions:
    convert_custom_share: Convert one local-currency custom share.
    convert_to_settlement: Convert an amount into the settlement currency.
"""

import logging

from utils import to_decimal, to_float

logger = logging.getLogger(__name__)


class Conversion:
    """
    Immutable local/rate/settlement triple.

    Attributes:
        local (float): Amount in the local (spending) currency.
        rate (float): Settlement-currency units per local unit.
        settlement (float): Amount in the trip's settlement currency.
    """

    def __init__(self, local=0, rate=1, settlement=0):
        self.local = to_float(local)
        self.rate = to_float(rate)
        self.settlement = to_float(settlement)

    @classmethod
    def from_local(cls, local, rate) -> "Conversion":
        """Build a consistent conversion from a local amount and a rate."""
        return cls(local, rate, to_decimal(local) * to_decimal(rate))

    def set_local(self, value) -> "Conversion":
        """Return a new conversion with a new local amount; rate unchanged."""
        local = to_decimal(value)
        return Conversion(local, self.rate, local * to_decimal(self.rate))

    def set_rate(self, value) -> "Conversion":
        """Return a new conversion with a new rate; local amount unchanged."""
        rate = to_decimal(value)
        return Conversion(self.local, rate, to_decimal(self.local) * rate)

    def set_settlement(self, value) -> "Conversion":
        """
        Return a new conversion with a new settlement amount.

        The rate is back-solved as settlement / local. With a zero local
        amount the rate is kept as is.
        """
        settlement = to_decimal(value)
        local = to_decimal(self.local)

        if local == 0:
            logger.debug("Local amount is 0, keeping rate %s", self.rate)
            return Conversion(self.local, self.rate, settlement)

        return Conversion(self.local, settlement / local, settlement)

    def to_dict(self) -> dict:
        return {
            "local": self.local,
            "rate": self.rate,
            "settlement": self.settlement
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, Conversion):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Conversion(local={self.local}, rate={self.rate}, settlement={self.settlement})"


def convert_custom_share(local_share, rate) -> float:
    """
    Convert one participant's custom share into the settlement currency.

    Each share is converted on its own with the transaction's rate.

    Args:
        local_share: Share in local currency.
        rate: The parent transaction's exchange rate.

    Returns:
        float: Share in settlement currency.
    """
    return float(to_decimal(local_share) * to_decimal(rate))


def convert_to_settlement(amount, currency: str, rate, settlement_currency: str) -> float:
    """
    Convert an amount from its currency into the settlement currency.

    Args:
        amount: Amount in the source currency.
        currency: Source currency code.
        rate: Exchange rate (1 source unit = rate settlement units).
        settlement_currency: The trip's settlement currency code.

    Returns:
        float: Amount in the settlement currency.
    """
    if (currency or "").strip().upper() == (settlement_currency or "").strip().upper():
        return to_float(amount)
    return float(to_decimal(amount) * to_decimal(rate))
