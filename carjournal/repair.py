"""Repair class for repair records."""
from typing import Any, Mapping, Optional


class Repair:
    """A repair paid for on the vehicle."""

    def __init__(
            self,
            date: str,
            description: str,
            cost: float,
            notes: Optional[str] = None,
            id: Optional[int] = None,
    ):
        self.id = id
        self.date = date
        self.description = description
        self.cost = cost
        self.notes = notes

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Repair":
        return cls(
            date=row["date"],
            description=row["description"],
            cost=row["cost"],
            notes=row.get("notes"),
            id=row.get("id"),
        )
