"""Dashboard totals across the whole journal."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict

from .fuel_entry import FuelEntry
from .metrics import (
    average_consumption,
    round_half_up,
    total_fuel_cost,
    total_kilometers,
    total_repair_cost,
)
from .repair import Repair
from .store import Store


@dataclass
class DashboardStats:
    """Summary figures, unrounded."""

    total_km: Decimal
    total_fuel_cost: Decimal
    average_consumption: Decimal
    total_repair_cost: Decimal

    def display(self) -> Dict[str, str]:
        """Figures rounded for display: 1 place for distance, 2 for money."""
        return {
            "total_km": str(round_half_up(self.total_km, 1)),
            "total_fuel_cost": str(round_half_up(self.total_fuel_cost, 2)),
            "average_consumption": str(round_half_up(self.average_consumption, 1)),
            "total_repair_cost": str(round_half_up(self.total_repair_cost, 2)),
        }


async def load_dashboard(store: Store) -> DashboardStats:
    """Query fuel and repair rows and compute the dashboard figures."""
    fuel_rows = await store.query(
        "SELECT id, date, kilometers, liters, price_per_liter, total_cost "
        "FROM fuel_entries ORDER BY date DESC, id DESC"
    )
    repair_rows = await store.query("SELECT id, date, description, cost FROM repairs")

    entries = [FuelEntry.from_row(row) for row in fuel_rows]
    repairs = [Repair.from_row(row) for row in repair_rows]
    return DashboardStats(
        total_km=total_kilometers(entries),
        total_fuel_cost=total_fuel_cost(entries),
        average_consumption=average_consumption(entries),
        total_repair_cost=total_repair_cost(repairs),
    )
