"""
Trips Module

This module defines the immutable trip snapshot the ledger reads from.

The surrounding application owns the read-modify-write cycle: it loads a
trip record, hands a Trip to the ledger functions and persists whatever
new snapshot comes back. Nothing here mutates an existing Trip.

Data Model:
    Trip:
        - trip_id: string
        - title: string
        - settlement_currency: string (e.g. HKD)
        - fx_rate: float (default rate for records without their own)
        - members: list of internal member names
        - external_names: list of external names
        - expenses: list of Expense
        - bookings: list of Booking
        - plan_days: list of PlanDay
"""

import logging
from typing import Optional

from config.settings import get_settings
from expenses import Booking, Expense, PlanDay
from participants import Roster
from utils import to_float

logger = logging.getLogger(__name__)


def _records(data: dict, key: str) -> list:
    """Return the list under key, dropping anything that is not a dict."""
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ValueError(f"{key} must be a list, got: {type(value).__name__}")
    return [item for item in value if isinstance(item, dict)]


class Trip:
    """Snapshot of one trip's roster and financial records."""

    def __init__(
        self,
        trip_id: Optional[str] = None,
        title: str = "",
        settlement_currency: Optional[str] = None,
        fx_rate: Optional[float] = None,
        roster: Optional[Roster] = None,
        expenses: Optional[list] = None,
        bookings: Optional[list] = None,
        plan_days: Optional[list] = None
    ):
        settings = get_settings()
        self.trip_id = trip_id
        self.title = title
        self.settlement_currency = str(settlement_currency or settings.SETTLEMENT_CURRENCY).strip().upper()
        self.fx_rate = settings.DEFAULT_FX_RATE if fx_rate is None else to_float(fx_rate)
        self.roster = roster or Roster()
        self.expenses = list(expenses or [])
        self.bookings = list(bookings or [])
        self.plan_days = list(plan_days or [])

    @property
    def members(self) -> list[str]:
        return self.roster.members

    @property
    def external_names(self) -> list[str]:
        return self.roster.external_names

    def with_expense(self, expense: Expense) -> "Trip":
        """Return a new snapshot with expense appended to the expense list."""
        return Trip(
            trip_id=self.trip_id,
            title=self.title,
            settlement_currency=self.settlement_currency,
            fx_rate=self.fx_rate,
            roster=self.roster,
            expenses=self.expenses + [expense],
            bookings=self.bookings,
            plan_days=self.plan_days
        )

    def to_dict(self) -> dict:
        return {
            "trip_id": self.trip_id,
            "title": self.title,
            "settlement_currency": self.settlement_currency,
            "fx_rate": self.fx_rate,
            "members": list(self.members),
            "external_names": list(self.external_names),
            "expenses": [e.to_dict() for e in self.expenses],
            "bookings": [b.to_dict() for b in self.bookings],
            "plan_days": [d.to_dict() for d in self.plan_days]
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Trip":
        """
        Build a Trip from a JSON-style trip record.

        Bad numbers become 0 and unknown split methods become empty policies.
        Only a structurally broken record (a list field that is not a list)
        raises.

        Raises:
            ValueError: If data is not a dict or a list field has the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError("trip record must be a dict")

        fx_rate = data.get("fx_rate")
        if fx_rate is None:
            fx_rate = get_settings().DEFAULT_FX_RATE
        fx_rate = to_float(fx_rate)

        trip = cls(
            trip_id=data.get("trip_id"),
            title=data.get("title") or "",
            settlement_currency=data.get("settlement_currency"),
            fx_rate=fx_rate,
            roster=Roster(data.get("members"), data.get("external_names")),
            expenses=[Expense.from_dict(e, fx_rate) for e in _records(data, "expenses")],
            bookings=[Booking.from_dict(b, fx_rate) for b in _records(data, "bookings")],
            plan_days=[PlanDay.from_dict(d, fx_rate) for d in _records(data, "plan_days")]
        )
        logger.debug(
            "Loaded trip %s: %d expenses, %d bookings, %d plan days",
            trip.trip_id, len(trip.expenses), len(trip.bookings), len(trip.plan_days)
        )
        return trip

    def __repr__(self) -> str:
        return f"Trip(id={self.trip_id!r}, members={self.members}, expenses={len(self.expenses)})"
