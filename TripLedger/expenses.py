"""
Expenses Module

This module defines the financial records of a group trip and the unified
transaction view the ledger folds over.

Features:
    - Split policies: Equally, Solely, Custom
    - Three transaction sources: expenses, bookings, scheduled-activity costs
    - Settlement expenses flagged with is_settlement
    - JSON-friendly to_dict / from_dict on every record

Data Model:
    SplitPolicy (tagged by "method"):
        - method: "Equally" | "Solely" | "Custom"
        - payer: string (internal member or external name)
        - custom_shares: dict name -> settlement-currency share (Custom only)
        - custom_local_shares: dict name -> local-currency share (Custom only)

    Expense:
        - expense_id, description, date
        - amount_local, exchange_rate, amount_settlement, currency
        - payment_method: "Cash" | "Credit Card"
        - split: SplitPolicy or None
        - is_settlement: bool

    Booking:
        - booking_id, booking_type, name, date
        - amount_local, exchange_rate, amount_settlement (None = unset)
        - split, payment_method

    ActivityCost (one scheduled item of a plan day):
        - item_id, activity, time
        - amount_local, exchange_rate, amount_settlement (None = unset)
        - split, payment_method

    PlanDay:
        - date, scheduled: list of ActivityCost

    Transaction (read-only unified view over the three sources)

Functions:
    parse_amounts: Read the local/rate/settlement triple from a record dict.
"""

import logging
from typing import Optional

from currency import Conversion, convert_custom_share
from utils import to_float

logger = logging.getLogger(__name__)


PAYMENT_CASH = "Cash"
PAYMENT_CREDIT_CARD = "Credit Card"
VALID_PAYMENT_METHODS = {PAYMENT_CASH, PAYMENT_CREDIT_CARD}

BOOKING_TYPES = {"Flight", "Hotel", "Activity", "Ticket", "Service", "Restaurant"}

SOURCE_EXPENSE = "Expense"
SOURCE_BOOKING = "Booking"
SOURCE_ACTIVITY = "Activity"
CATEGORY_SETTLEMENT = "Settlement"


def _payment_method(value, default: str) -> str:
    if value in VALID_PAYMENT_METHODS:
        return value
    return default


def _date_text(value) -> Optional[str]:
    """Dates are kept as ISO strings; anything else is stringified."""
    if value is None or value == "":
        return None
    return str(value)


def _clean_name(value) -> Optional[str]:
    """
    Normalize a person name the way the roster does.

    Strings and numbers are stripped; anything else (lists, dicts, bools)
    is not a name and becomes None.
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    return str(value).strip() or None


def _share_items(shares) -> list:
    if not isinstance(shares, dict):
        return []
    items = []
    for name, amount in shares.items():
        name = _clean_name(name)
        if name is not None:
            items.append((name, amount))
    return items


# =============================================================================
# Split Policies
# =============================================================================

class SplitPolicy:
    """
    Base class for the three split policies.

    Every policy names exactly one payer. Subclasses set the method tag.
    """

    method = None

    def __init__(self, payer: Optional[str]):
        self.payer = _clean_name(payer)

    def to_dict(self) -> dict:
        return {
            "method": self.method,
            "payer": self.payer,
            "custom_shares": {},
            "custom_local_shares": {}
        }

    @classmethod
    def from_dict(cls, data) -> Optional["SplitPolicy"]:
        """
        Build the matching policy from a dict.

        Returns None for a missing dict or an unknown method, which the
        ledger treats as an empty policy.
        """
        if not isinstance(data, dict):
            return None

        method = data.get("method")
        payer = _clean_name(data.get("payer"))

        if method == Equally.method:
            return Equally(payer)
        if method == Solely.method:
            return Solely(payer)
        if method == Custom.method:
            return Custom(
                payer,
                custom_shares=data.get("custom_shares"),
                custom_local_shares=data.get("custom_local_shares")
            )

        logger.debug("Unknown split method %r, treating as empty policy", method)
        return None

    def __eq__(self, other) -> bool:
        if not isinstance(other, SplitPolicy):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(payer={self.payer!r})"


class Equally(SplitPolicy):
    """Full amount divided evenly across all internal members."""

    method = "Equally"


class Solely(SplitPolicy):
    """Full amount attributed to the payer alone."""

    method = "Solely"


class Custom(SplitPolicy):
    """
    Explicit per-person shares.

    Shares are kept in both settlement and local currency. Their sum is not
    forced to match the transaction amount.
    """

    method = "Custom"

    def __init__(
        self,
        payer: Optional[str],
        custom_shares: Optional[dict] = None,
        custom_local_shares: Optional[dict] = None
    ):
        super().__init__(payer)
        self.custom_shares = {
            name: to_float(amount)
            for name, amount in _share_items(custom_shares)
        }
        self.custom_local_shares = {
            name: to_float(amount)
            for name, amount in _share_items(custom_local_shares)
        }

    def with_local_share(self, person: str, local_value, rate) -> "Custom":
        """
        Return a copy with one person's local share set and converted.

        Args:
            person: Participant name (internal or external).
            local_value: Share in local currency.
            rate: The parent transaction's exchange rate.

        Returns:
            Custom: New policy with both share maps updated for person.

        Raises:
            ValueError: If person is not a usable name.
        """
        person = _clean_name(person)
        if person is None:
            raise ValueError("person must be a non-empty name")

        local_shares = dict(self.custom_local_shares)
        shares = dict(self.custom_shares)
        local_shares[person] = to_float(local_value)
        shares[person] = convert_custom_share(local_value, rate)
        return Custom(self.payer, custom_shares=shares, custom_local_shares=local_shares)

    def to_dict(self) -> dict:
        return {
            "method": self.method,
            "payer": self.payer,
            "custom_shares": dict(self.custom_shares),
            "custom_local_shares": dict(self.custom_local_shares)
        }

    def __repr__(self) -> str:
        return f"Custom(payer={self.payer!r}, custom_shares={self.custom_shares})"


# =============================================================================
# Transaction Sources
# =============================================================================

def parse_amounts(data: dict, default_rate, unset_is_none: bool = False):
    """
    Read the local/rate/settlement triple from a record dict.

    A missing or zero rate falls back to the trip's default rate, and then
    to 1. A missing settlement amount is derived from the local amount when
    that is nonzero.

    Args:
        data: Record dict.
        default_rate: Trip-level exchange rate.
        unset_is_none: Keep a fully unset settlement amount as None instead
            of 0 (bookings and scheduled items).

    Returns:
        tuple: (amount_local, exchange_rate, amount_settlement)
    """
    rate = to_float(data.get("exchange_rate")) or to_float(default_rate) or 1.0

    local = data.get("amount_local")
    settlement = data.get("amount_settlement")

    if settlement is None and to_float(local) != 0:
        settlement = Conversion.from_local(local, rate).settlement
    elif settlement is not None:
        settlement = to_float(settlement)
    elif not unset_is_none:
        settlement = 0.0

    return to_float(local), rate, settlement


class Expense:
    """
    A direct group expense, or a synthetic settlement transfer.

    Attributes:
        expense_id (str): Unique identifier.
        description (str): Free-text description.
        amount_local (float): Amount in local currency.
        exchange_rate (float): Settlement units per local unit.
        amount_settlement (float): Amount in settlement currency.
        currency (str): Local currency code.
        payment_method (str): "Cash" or "Credit Card".
        split (SplitPolicy | None): How the amount is shared.
        is_settlement (bool): True for debt-clearing transfers.
        date (str | None): Date of the expense (YYYY-MM-DD).
    """

    def __init__(
        self,
        expense_id: str,
        description: str = "",
        amount_local: float = 0.0,
        exchange_rate: float = 1.0,
        amount_settlement: float = 0.0,
        currency: str = "",
        payment_method: str = PAYMENT_CASH,
        split: Optional[SplitPolicy] = None,
        is_settlement: bool = False,
        date: Optional[str] = None
    ):
        self.expense_id = expense_id
        self.description = description
        self.amount_local = amount_local
        self.exchange_rate = exchange_rate
        self.amount_settlement = amount_settlement
        self.currency = currency
        self.payment_method = payment_method
        self.split = split
        self.is_settlement = is_settlement
        self.date = date

    def to_dict(self) -> dict:
        return {
            "expense_id": self.expense_id,
            "description": self.description,
            "amount_local": self.amount_local,
            "exchange_rate": self.exchange_rate,
            "amount_settlement": self.amount_settlement,
            "currency": self.currency,
            "payment_method": self.payment_method,
            "split": self.split.to_dict() if self.split else None,
            "is_settlement": self.is_settlement,
            "date": self.date
        }

    @classmethod
    def from_dict(cls, data: dict, default_rate=1.0) -> "Expense":
        local, rate, settlement = parse_amounts(data, default_rate)
        return cls(
            expense_id=data.get("expense_id"),
            description=data.get("description") or "",
            amount_local=local,
            exchange_rate=rate,
            amount_settlement=settlement,
            currency=data.get("currency") or "",
            payment_method=_payment_method(data.get("payment_method"), PAYMENT_CASH),
            split=SplitPolicy.from_dict(data.get("split")),
            is_settlement=data.get("is_settlement") is True,
            date=_date_text(data.get("date"))
        )

    def __repr__(self) -> str:
        return (
            f"Expense(id='{self.expense_id}', amount={self.amount_settlement}, "
            f"split={self.split!r}, is_settlement={self.is_settlement})"
        )


class Booking:
    """
    A pre-trip or on-trip reservation (flight, hotel, ticket, ...).

    An unset amount_settlement counts as 0 in the ledger.
    """

    def __init__(
        self,
        booking_id: str,
        booking_type: str = "Activity",
        name: str = "",
        amount_local: float = 0.0,
        exchange_rate: float = 1.0,
        amount_settlement: Optional[float] = None,
        currency: str = "",
        payment_method: str = PAYMENT_CREDIT_CARD,
        split: Optional[SplitPolicy] = None,
        date: Optional[str] = None
    ):
        self.booking_id = booking_id
        self.booking_type = booking_type
        self.name = name
        self.amount_local = amount_local
        self.exchange_rate = exchange_rate
        self.amount_settlement = amount_settlement
        self.currency = currency
        self.payment_method = payment_method
        self.split = split
        self.date = date

    def to_dict(self) -> dict:
        return {
            "booking_id": self.booking_id,
            "booking_type": self.booking_type,
            "name": self.name,
            "amount_local": self.amount_local,
            "exchange_rate": self.exchange_rate,
            "amount_settlement": self.amount_settlement,
            "currency": self.currency,
            "payment_method": self.payment_method,
            "split": self.split.to_dict() if self.split else None,
            "date": self.date
        }

    @classmethod
    def from_dict(cls, data: dict, default_rate=1.0) -> "Booking":
        local, rate, settlement = parse_amounts(data, default_rate, unset_is_none=True)
        booking_type = data.get("booking_type")
        return cls(
            booking_id=data.get("booking_id"),
            booking_type=booking_type if booking_type in BOOKING_TYPES else "Activity",
            name=data.get("name") or "",
            amount_local=local,
            exchange_rate=rate,
            amount_settlement=settlement,
            currency=data.get("currency") or "",
            payment_method=_payment_method(data.get("payment_method"), PAYMENT_CREDIT_CARD),
            split=SplitPolicy.from_dict(data.get("split")),
            date=_date_text(data.get("date"))
        )

    def __repr__(self) -> str:
        return f"Booking(id='{self.booking_id}', type='{self.booking_type}', amount={self.amount_settlement})"


class ActivityCost:
    """A scheduled itinerary item that may carry a cost."""

    def __init__(
        self,
        item_id: str,
        activity: str = "",
        time: Optional[str] = None,
        amount_local: float = 0.0,
        exchange_rate: float = 1.0,
        amount_settlement: Optional[float] = None,
        currency: str = "",
        payment_method: str = PAYMENT_CASH,
        split: Optional[SplitPolicy] = None
    ):
        self.item_id = item_id
        self.activity = activity
        self.time = time
        self.amount_local = amount_local
        self.exchange_rate = exchange_rate
        self.amount_settlement = amount_settlement
        self.currency = currency
        self.payment_method = payment_method
        self.split = split

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "activity": self.activity,
            "time": self.time,
            "amount_local": self.amount_local,
            "exchange_rate": self.exchange_rate,
            "amount_settlement": self.amount_settlement,
            "currency": self.currency,
            "payment_method": self.payment_method,
            "split": self.split.to_dict() if self.split else None
        }

    @classmethod
    def from_dict(cls, data: dict, default_rate=1.0) -> "ActivityCost":
        local, rate, settlement = parse_amounts(data, default_rate, unset_is_none=True)
        return cls(
            item_id=data.get("item_id"),
            activity=data.get("activity") or "",
            time=data.get("time"),
            amount_local=local,
            exchange_rate=rate,
            amount_settlement=settlement,
            currency=data.get("currency") or "",
            payment_method=_payment_method(data.get("payment_method"), PAYMENT_CASH),
            split=SplitPolicy.from_dict(data.get("split"))
        )


class PlanDay:
    """One itinerary day and its scheduled items."""

    def __init__(self, date: str, scheduled: Optional[list] = None):
        self.date = date
        self.scheduled = list(scheduled or [])

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "scheduled": [item.to_dict() for item in self.scheduled]
        }

    @classmethod
    def from_dict(cls, data: dict, default_rate=1.0) -> "PlanDay":
        return cls(
            date=_date_text(data.get("date")) or "",
            scheduled=[
                ActivityCost.from_dict(item, default_rate)
                for item in (data.get("scheduled") or [])
                if isinstance(item, dict)
            ]
        )


# =============================================================================
# Unified Transaction View
# =============================================================================

class Transaction:
    """
    Read-only view of one financial event, whatever its source.

    Attributes:
        transaction_id (str): Id of the underlying record.
        description (str): Description, booking name or activity name.
        amount_settlement (float): Amount in settlement currency.
        split (SplitPolicy | None): Split policy of the record.
        source (str): "Expense", "Booking" or "Activity".
        category (str): Display label ("Settlement", "Booking (Hotel)", ...).
        date (str): Date or "" when unknown.
        is_settlement (bool): True for settlement transfers.
        payment_method (str | None): "Cash" or "Credit Card".
    """

    def __init__(
        self,
        transaction_id: str,
        description: str,
        amount_settlement: float,
        split: Optional[SplitPolicy],
        source: str,
        category: str,
        date: str = "",
        is_settlement: bool = False,
        payment_method: Optional[str] = None
    ):
        self.transaction_id = transaction_id
        self.description = description
        self.amount_settlement = amount_settlement
        self.split = split
        self.source = source
        self.category = category
        self.date = date
        self.is_settlement = is_settlement
        self.payment_method = payment_method

    @property
    def payer(self) -> Optional[str]:
        return self.split.payer if self.split else None

    @classmethod
    def from_expense(cls, expense: Expense) -> "Transaction":
        return cls(
            transaction_id=expense.expense_id,
            description=expense.description,
            amount_settlement=to_float(expense.amount_settlement),
            split=expense.split,
            source=SOURCE_EXPENSE,
            category=CATEGORY_SETTLEMENT if expense.is_settlement else SOURCE_EXPENSE,
            date=expense.date or "",
            is_settlement=expense.is_settlement,
            payment_method=expense.payment_method
        )

    @classmethod
    def from_booking(cls, booking: Booking) -> "Transaction":
        return cls(
            transaction_id=booking.booking_id,
            description=booking.name,
            amount_settlement=to_float(booking.amount_settlement),
            split=booking.split,
            source=SOURCE_BOOKING,
            category=f"{SOURCE_BOOKING} ({booking.booking_type})",
            date=booking.date or "",
            payment_method=booking.payment_method
        )

    @classmethod
    def from_activity(cls, item: ActivityCost, date: str) -> "Transaction":
        return cls(
            transaction_id=item.item_id,
            description=item.activity,
            amount_settlement=to_float(item.amount_settlement),
            split=item.split,
            source=SOURCE_ACTIVITY,
            category=SOURCE_ACTIVITY,
            date=date or "",
            payment_method=item.payment_method
        )

    def to_dict(self) -> dict:
        return {
            "transaction_id": self.transaction_id,
            "description": self.description,
            "amount_settlement": self.amount_settlement,
            "payer": self.payer,
            "split": self.split.to_dict() if self.split else None,
            "source": self.source,
            "category": self.category,
            "date": self.date,
            "is_settlement": self.is_settlement,
            "payment_method": self.payment_method
        }

    def __repr__(self) -> str:
        return (
            f"Transaction(id='{self.transaction_id}', source='{self.source}', "
            f"amount={self.amount_settlement}, payer={self.payer!r})"
        )
