"""
Participants Module

This module holds the roster of people a trip's money can flow between.

Features:
    - Ordered internal members (equal-split denominators, spending totals)
    - Open set of external names (custom-split participants and payers only)
    - Name normalization (whitespace stripped, empty and duplicate names dropped)

Data Model:
    Roster:
        - members: list of names, ordered, unique
        - external_names: list of names outside the group

Functions:
    normalize_names: Clean a raw list of names.
"""

from typing import Iterable, Optional


def normalize_names(names: Optional[Iterable]) -> list[str]:
    """
    Clean a raw list of names.

    Strips whitespace, drops empty entries and keeps the first occurrence of
    each name.

    Args:
        names: Iterable of raw names (None is treated as empty).

    Returns:
        list[str]: Ordered, unique names.

    Raises:
        ValueError: If names is a string or another non-list value.
    """
    if names is None:
        return []
    if isinstance(names, (str, bytes)) or not isinstance(names, (list, tuple)):
        raise ValueError(f"names must be a list of strings, got: {type(names).__name__}")

    cleaned = []
    for name in names:
        if name is None:
            continue
        name = str(name).strip()
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned


class Roster:
    """
    Internal members and external names of a trip.

    Attributes:
        members (list[str]): Internal members in trip order.
        external_names (list[str]): People outside the group. A name that is
            also an internal member is kept only as a member.
    """

    def __init__(self, members: Optional[list] = None, external_names: Optional[list] = None):
        self.members = normalize_names(members)
        self.external_names = [
            name for name in normalize_names(external_names)
            if name not in self.members
        ]

    @property
    def people(self) -> list[str]:
        """All known names, members first."""
        return self.members + self.external_names

    def is_internal(self, name: str) -> bool:
        return name in self.members

    def is_external(self, name: str) -> bool:
        return name in self.external_names

    def to_dict(self) -> dict:
        return {
            "members": list(self.members),
            "external_names": list(self.external_names)
        }

    def __repr__(self) -> str:
        return f"Roster(members={self.members}, external_names={self.external_names})"
