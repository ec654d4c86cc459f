"""FuelEntry class for fill-up records."""
from typing import Any, Mapping, Optional


class FuelEntry:
    """
    One fuel purchase, with the odometer reading at the pump.

    total_cost is computed once when the entry is inserted and stored with
    it. Readers use the stored value and never recompute it.
    """

    def __init__(
            self,
            date: str,
            kilometers: float,
            liters: float,
            price_per_liter: float,
            total_cost: float,
            notes: Optional[str] = None,
            id: Optional[int] = None,
    ):
        self.id = id
        self.date = date
        self.kilometers = kilometers
        self.liters = liters
        self.price_per_liter = price_per_liter
        self.total_cost = total_cost
        self.notes = notes

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "FuelEntry":
        return cls(
            date=row["date"],
            kilometers=row["kilometers"],
            liters=row["liters"],
            price_per_liter=row["price_per_liter"],
            total_cost=row["total_cost"],
            notes=row.get("notes"),
            id=row.get("id"),
        )
