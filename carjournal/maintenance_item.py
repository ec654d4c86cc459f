"""MaintenanceItem class for scheduled services."""
from typing import Any, Mapping, Optional


class MaintenanceItem:
    """
    A recurring or one-off service.

    Distance-based items carry interval_km and last_maintenance_km;
    date-based items carry next_due_date. An item may carry both.
    """

    def __init__(
            self,
            type: str,
            date: Optional[str] = None,
            description: Optional[str] = None,
            interval_km: Optional[int] = None,
            last_maintenance_km: Optional[float] = None,
            next_due_km: Optional[float] = None,
            next_due_date: Optional[str] = None,
            completed: bool = False,
            notes: Optional[str] = None,
            id: Optional[int] = None,
    ):
        self.id = id
        self.type = type
        self.date = date
        self.description = description
        self.interval_km = interval_km
        self.last_maintenance_km = last_maintenance_km
        self.next_due_km = next_due_km
        self.next_due_date = next_due_date
        self.completed = bool(completed)
        self.notes = notes

    @property
    def is_distance_based(self) -> bool:
        return self.interval_km is not None

    @property
    def due_km(self) -> Optional[float]:
        """Odometer reading at which the next service is due."""
        if self.interval_km is not None:
            return (self.last_maintenance_km or 0) + self.interval_km
        return self.next_due_km

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "MaintenanceItem":
        return cls(
            type=row["type"],
            date=row.get("date"),
            description=row.get("description") or None,
            interval_km=row.get("interval_km"),
            last_maintenance_km=row.get("last_maintenance_km"),
            next_due_km=row.get("next_due_km"),
            next_due_date=row.get("next_due_date"),
            completed=row.get("completed") or False,
            notes=row.get("notes"),
            id=row.get("id"),
        )
