"""
Derived values for display: distance, fuel spend, consumption, repair
spend and maintenance distance.

Everything here is pure. Inputs are entities already fetched by a
repository; arithmetic is done in Decimal so totals match to the cent no
matter the order rows come back in. Rounding for display is left to the
caller, through round_half_up().
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List, Optional, Sequence, Tuple, Union

from .fuel_entry import FuelEntry
from .maintenance_item import MaintenanceItem
from .repair import Repair
from .status import Status

Number = Union[int, float, Decimal]

ZERO = Decimal(0)
HUNDRED = Decimal(100)


def to_decimal(value: Optional[Any]) -> Decimal:
    """Convert a stored number to Decimal without binary float noise. None is 0."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value: Number, places: int) -> Decimal:
    """Round half away from zero to a fixed number of places, for display."""
    quantum = Decimal(1).scaleb(-places)
    return to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)


def total_kilometers(entries: Sequence[FuelEntry]) -> Decimal:
    """Odometer of the most recent entry. Entries must be ordered newest first."""
    if not entries:
        return ZERO
    return to_decimal(entries[0].kilometers)


def total_fuel_cost(entries: Sequence[FuelEntry]) -> Decimal:
    """Sum of liters * price per liter over all entries."""
    return sum(
        (to_decimal(e.liters) * to_decimal(e.price_per_liter) for e in entries),
        ZERO,
    )


def total_liters(entries: Sequence[FuelEntry]) -> Decimal:
    return sum((to_decimal(e.liters) for e in entries), ZERO)


def average_consumption(entries: Sequence[FuelEntry]) -> Decimal:
    """
    Liters per 100 km over the supplied window.

    Entries must be ordered newest first. The distance is the newest
    odometer minus the oldest; with fewer than two entries or no positive
    distance the result is 0.
    """
    if len(entries) < 2:
        return ZERO
    distance = to_decimal(entries[0].kilometers) - to_decimal(entries[-1].kilometers)
    if distance <= 0:
        return ZERO
    return total_liters(entries) / distance * HUNDRED


def per_entry_consumption(
    entry: FuelEntry, previous: Optional[FuelEntry]
) -> Optional[Decimal]:
    """
    Liters per 100 km for one fill-up.

    The fuel bought at this fill-up covers the distance driven since the
    previous one. Returns None (not available) when there is no previous
    entry or the distance is not positive.
    """
    if previous is None:
        return None
    distance = to_decimal(entry.kilometers) - to_decimal(previous.kilometers)
    if distance <= 0:
        return None
    return to_decimal(entry.liters) / distance * HUNDRED


def consumption_series(
    entries: Sequence[FuelEntry],
) -> List[Tuple[FuelEntry, Optional[Decimal]]]:
    """
    Pair every entry with its per-entry consumption.

    The predecessor of an entry is the one immediately before it by
    odometer reading (ties broken by id). Output keeps the input order.
    """
    order = sorted(
        range(len(entries)),
        key=lambda i: (to_decimal(entries[i].kilometers), entries[i].id or 0, i),
    )
    consumption: List[Optional[Decimal]] = [None] * len(entries)
    previous = None
    for i in order:
        consumption[i] = per_entry_consumption(entries[i], previous)
        previous = entries[i]
    return list(zip(entries, consumption))


def total_repair_cost(repairs: Sequence[Repair]) -> Decimal:
    """Sum of cost over all repairs."""
    return sum((to_decimal(r.cost) for r in repairs), ZERO)


def kilometers_until_next_maintenance(
    item: MaintenanceItem, current_odometer: Number
) -> Optional[Decimal]:
    """
    Distance left before the next service: last service + interval - current.

    Zero or negative means overdue. None when the item has no distance
    interval.
    """
    if item.interval_km is None:
        return None
    due = to_decimal(item.last_maintenance_km) + to_decimal(item.interval_km)
    return due - to_decimal(current_odometer)


def check_status(current: Number, due: Number, soon_threshold: Number) -> Status:
    """Determine status by comparing current value to due threshold."""
    current, due = to_decimal(current), to_decimal(due)
    if current >= due:
        return Status.OVERDUE
    if current >= due - to_decimal(soon_threshold):
        return Status.DUE_SOON
    return Status.OK
