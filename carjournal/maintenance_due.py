"""MaintenanceDue dataclass and the due-status evaluation for one item."""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from dateutil.parser import isoparse

from .maintenance_item import MaintenanceItem
from .metrics import check_status, kilometers_until_next_maintenance, to_decimal
from .status import Status

logger = logging.getLogger(__name__)


@dataclass
class MaintenanceDue:
    """Calculated due information for a maintenance item."""

    item: MaintenanceItem
    status: Status
    due_km: Optional[Decimal] = None
    km_remaining: Optional[Decimal] = None
    due_date: Optional[str] = None
    days_remaining: Optional[int] = None

    @property
    def is_due(self) -> bool:
        return self.status in (Status.OVERDUE, Status.DUE_SOON)


def days_until(due_date: str, today: date) -> int:
    """Days from today to an ISO due date; negative once it has passed."""
    return (isoparse(due_date).date() - today).days


def evaluate_maintenance(
    item: MaintenanceItem,
    current_odometer: float,
    today: Optional[date] = None,
    due_soon_km: float = 1000,
    due_soon_days: int = 30,
) -> MaintenanceDue:
    """
    Work out whether an item is due, by distance and by date.

    Whichever check is more urgent wins. Completed items are DONE; items
    with nothing to compare against are UNKNOWN.
    """
    today = today or date.today()

    if item.completed:
        return MaintenanceDue(item=item, status=Status.DONE, due_date=item.next_due_date)

    due_km = item.due_km
    km_remaining = kilometers_until_next_maintenance(item, current_odometer)
    if km_remaining is None and due_km is not None:
        km_remaining = to_decimal(due_km) - to_decimal(current_odometer)

    days_remaining = None
    if item.next_due_date:
        try:
            days_remaining = days_until(item.next_due_date, today)
        except ValueError:
            logger.warning(
                "Ignoring unparseable due date %r on maintenance item %s",
                item.next_due_date, item.id,
            )

    if due_km is None and days_remaining is None:
        status = Status.UNKNOWN
    else:
        status = Status.OK
        if due_km is not None:
            status = check_status(current_odometer, due_km, due_soon_km)
        if days_remaining is not None:
            date_status = check_status(0, days_remaining, due_soon_days)
            # Escalate status if date check is worse
            if date_status.value < status.value:
                status = date_status

    return MaintenanceDue(
        item=item,
        status=status,
        due_km=to_decimal(due_km) if due_km is not None else None,
        km_remaining=km_remaining,
        due_date=item.next_due_date,
        days_remaining=days_remaining,
    )
