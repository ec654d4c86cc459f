"""
Typed insert/list operations for fuel entries, repairs and maintenance.

Each repository wraps a Store passed in by the caller. Input is validated
here, before anything reaches the store; store errors propagate unchanged.
"""

import logging
from decimal import Decimal
from enum import Enum
from typing import Any, List, Mapping, Optional

from .errors import ValidationError
from .fuel_entry import FuelEntry
from .maintenance_item import MaintenanceItem
from .repair import Repair
from .store import Store
from .validation import parse_date, parse_int, parse_number, parse_text

logger = logging.getLogger(__name__)


class FuelOrder(Enum):
    """Orderings supported by FuelRepository.list."""

    DISPLAY = "date DESC, id DESC"
    INSERTION = "id ASC"


class FuelRepository:
    """Fill-up records."""

    def __init__(self, store: Store):
        self.store = store

    async def insert(self, fields: Mapping[str, Any]) -> FuelEntry:
        """
        Validate and store a fill-up.

        kilometers, liters and price_per_liter are required. total_cost is
        computed here and stored with the row.
        """
        kilometers = parse_number(fields, "kilometers", minimum=0)
        liters = parse_number(fields, "liters", positive=True)
        price = parse_number(fields, "price_per_liter", positive=True)
        entry = FuelEntry(
            date=parse_date(fields),
            kilometers=kilometers,
            liters=liters,
            price_per_liter=price,
            total_cost=float(Decimal(str(liters)) * Decimal(str(price))),
            notes=parse_text(fields, "notes", required=False),
        )

        result = await self.store.execute(
            "INSERT INTO fuel_entries (date, kilometers, liters, price_per_liter, total_cost, notes) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (entry.date, entry.kilometers, entry.liters, entry.price_per_liter,
             entry.total_cost, entry.notes),
        )
        entry.id = result.inserted_id
        logger.info("Added fuel entry %s at %s km", entry.id, entry.kilometers)
        return entry

    async def list(self, order: FuelOrder = FuelOrder.DISPLAY) -> List[FuelEntry]:
        rows = await self.store.query(f"SELECT * FROM fuel_entries ORDER BY {order.value}")
        return [FuelEntry.from_row(row) for row in rows]

    async def latest_odometer(self) -> Optional[float]:
        """Odometer of the most recently inserted fill-up, or None."""
        rows = await self.store.query(
            "SELECT kilometers FROM fuel_entries ORDER BY id DESC LIMIT 1"
        )
        return rows[0]["kilometers"] if rows else None


class RepairRepository:
    """Repair records."""

    def __init__(self, store: Store):
        self.store = store

    async def insert(self, fields: Mapping[str, Any]) -> Repair:
        """Validate and store a repair. description and cost are required."""
        repair = Repair(
            date=parse_date(fields),
            description=parse_text(fields, "description"),
            cost=parse_number(fields, "cost", minimum=0),
            notes=parse_text(fields, "notes", required=False),
        )
        result = await self.store.execute(
            "INSERT INTO repairs (date, description, cost, notes) VALUES (?, ?, ?, ?)",
            (repair.date, repair.description, repair.cost, repair.notes),
        )
        repair.id = result.inserted_id
        logger.info("Added repair %s", repair.id)
        return repair

    async def list(self) -> List[Repair]:
        rows = await self.store.query("SELECT * FROM repairs ORDER BY id DESC")
        return [Repair.from_row(row) for row in rows]


class MaintenanceRepository:
    """Maintenance items, both distance-interval and due-date based."""

    def __init__(self, store: Store):
        self.store = store

    async def insert(self, fields: Mapping[str, Any]) -> MaintenanceItem:
        """
        Validate and store a maintenance item.

        type is required, plus at least one way of telling when it is due:
        interval_km (distance-based, counted from last_maintenance_km,
        default 0), next_due_km, or next_due_date.
        """
        interval_km = parse_int(fields, "interval_km", required=False, positive=True)
        last_km = parse_number(fields, "last_maintenance_km", required=False, minimum=0)
        next_due_km = parse_number(fields, "next_due_km", required=False, minimum=0)
        next_due_date = parse_date(fields, "next_due_date", default_today=False)

        if interval_km is None and next_due_km is None and next_due_date is None:
            raise ValidationError(
                "a due distance (interval_km or next_due_km) or next_due_date is required",
                field="interval_km",
            )
        if interval_km is not None:
            last_km = last_km or 0
            next_due_km = last_km + interval_km

        item = MaintenanceItem(
            type=parse_text(fields, "type"),
            date=parse_date(fields),
            description=parse_text(fields, "description", required=False),
            interval_km=interval_km,
            last_maintenance_km=last_km,
            next_due_km=next_due_km,
            next_due_date=next_due_date,
            notes=parse_text(fields, "notes", required=False),
        )
        # Files created before the schema reconciliation keep description NOT NULL
        result = await self.store.execute(
            "INSERT INTO maintenance (date, type, description, next_due_date, next_due_km, "
            "last_maintenance_km, interval_km, completed, notes) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?)",
            (item.date, item.type, item.description or "", item.next_due_date, item.next_due_km,
             item.last_maintenance_km, item.interval_km, item.notes),
        )
        item.id = result.inserted_id
        logger.info("Added maintenance item %s (%s)", item.id, item.type)
        return item

    async def get(self, item_id: int) -> Optional[MaintenanceItem]:
        rows = await self.store.query(
            "SELECT * FROM maintenance WHERE id = ?",
            (item_id,),
        )
        return MaintenanceItem.from_row(rows[0]) if rows else None

    async def mark_done(self, item_id: int, odometer: Optional[float] = None) -> MaintenanceItem:
        """
        Record that a service was carried out.

        A distance-interval item serviced at a known odometer stays active:
        its last service moves to the odometer and the next due distance
        moves with it. Anything else is marked completed, with the last
        service distance set to the odometer (or to the due distance when
        no odometer is given).
        """
        if odometer is not None:
            odometer = parse_number({"odometer": odometer}, "odometer", minimum=0)
        item = await self.get(item_id)
        if item is None:
            raise ValidationError(f"No maintenance item with id {item_id}", field="id")

        if item.is_distance_based and odometer is not None:
            await self.store.execute(
                "UPDATE maintenance SET last_maintenance_km = ?, next_due_km = ? + interval_km "
                "WHERE id = ?",
                (odometer, odometer, item_id),
            )
            logger.info("Maintenance item %s serviced at %s km", item_id, odometer)
        elif odometer is not None:
            await self.store.execute(
                "UPDATE maintenance SET completed = 1, last_maintenance_km = ? WHERE id = ?",
                (odometer, item_id),
            )
            logger.info("Maintenance item %s completed at %s km", item_id, odometer)
        else:
            await self.store.execute(
                "UPDATE maintenance SET completed = 1, last_maintenance_km = next_due_km "
                "WHERE id = ?",
                (item_id,),
            )
            logger.info("Maintenance item %s completed", item_id)

        return await self.get(item_id)

    async def list(self) -> List[MaintenanceItem]:
        """Active items first, then completed; newest date, then type, within each."""
        rows = await self.store.query(
            "SELECT * FROM maintenance "
            "ORDER BY COALESCE(completed, 0) ASC, date DESC, type ASC, id DESC"
        )
        return [MaintenanceItem.from_row(row) for row in rows]

    async def current_odometer(self, fuel: FuelRepository) -> float:
        """
        Best known odometer reading.

        The latest fill-up is authoritative; without fill-ups, the highest
        last-service distance recorded on any maintenance item is used.
        """
        latest = await fuel.latest_odometer()
        if latest is not None:
            return latest
        rows = await self.store.query(
            "SELECT MAX(last_maintenance_km) AS km FROM maintenance"
        )
        return (rows[0]["km"] or 0) if rows else 0
