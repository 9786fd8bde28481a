"""
Utilities Module

This module provides numeric and formatting helpers shared by the trip
ledger modules.

Features:
    - Safe numeric coercion (non-numeric, NaN and infinite input become 0)
    - Decimal-safe rounding for display
    - Currency formatting

Functions:
    to_decimal: Coerce any input into a finite Decimal.
    to_float: Coerce any input into a finite float.
    round_for_display: Round to 2 decimal places for display.
    format_currency: Format amount with a currency code.
    generate_id: Generate a short random record identifier.
"""

import uuid
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP


ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """
    Coerce a value into a finite Decimal.

    Values go through str() first so that floats such as 7.8 keep their
    printed value instead of their binary expansion.

    Args:
        value: Number, numeric string, Decimal or anything else.

    Returns:
        Decimal: The parsed value, or 0 when the input is not a finite number.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO

    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, TypeError, ValueError):
        return ZERO

    if not result.is_finite():
        return ZERO
    return result


def to_float(value) -> float:
    """Coerce a value into a finite float (0.0 for non-numeric input)."""
    return float(to_decimal(value))


def round_for_display(value) -> float:
    """
    Round a value to 2 decimal places and convert to float.

    Uses ROUND_HALF_UP. Only meant for presentation; ledger math keeps full
    precision.
    """
    return float(to_decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_currency(amount, currency: str = "HKD") -> str:
    """
    Format a monetary amount with its currency code.

    Args:
        amount: The amount to format.
        currency: ISO currency code (default: HKD).

    Returns:
        str: Formatted string like "1,234.56 HKD".
    """
    return f"{round_for_display(amount):,.2f} {currency}"


def generate_id() -> str:
    """Generate a short random identifier for a new record."""
    return uuid.uuid4().hex[:9]
