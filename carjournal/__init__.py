"""
Vehicle logbook core.

This package provides storage and derived figures for a car journal:
- Store: the SQLite connection and its execute/query primitives
- schema: table definitions and additive migrations
- FuelEntry, Repair, MaintenanceItem: journal records
- FuelRepository, RepairRepository, MaintenanceRepository: typed access
- metrics: consumption, totals and maintenance distance
- MaintenanceDue / Status: due evaluation for maintenance items
- load_dashboard: summary figures
"""

from .errors import (
    JournalError,
    StoreNotInitialized,
    ValidationError,
    QueryError,
    MigrationError,
    ConfigError,
)
from .status import Status
from .fuel_entry import FuelEntry
from .repair import Repair
from .maintenance_item import MaintenanceItem
from .maintenance_due import MaintenanceDue, evaluate_maintenance
from .metrics import (
    total_kilometers,
    total_fuel_cost,
    average_consumption,
    per_entry_consumption,
    consumption_series,
    total_repair_cost,
    kilometers_until_next_maintenance,
    check_status,
    round_half_up,
)
from .store import Store, StoreState, ExecResult
from .repositories import (
    FuelOrder,
    FuelRepository,
    RepairRepository,
    MaintenanceRepository,
)
from .dashboard import DashboardStats, load_dashboard
from .config import Settings, load_settings

__all__ = [
    "JournalError",
    "StoreNotInitialized",
    "ValidationError",
    "QueryError",
    "MigrationError",
    "ConfigError",
    "Status",
    "FuelEntry",
    "Repair",
    "MaintenanceItem",
    "MaintenanceDue",
    "evaluate_maintenance",
    "total_kilometers",
    "total_fuel_cost",
    "average_consumption",
    "per_entry_consumption",
    "consumption_series",
    "total_repair_cost",
    "kilometers_until_next_maintenance",
    "check_status",
    "round_half_up",
    "Store",
    "StoreState",
    "ExecResult",
    "FuelOrder",
    "FuelRepository",
    "RepairRepository",
    "MaintenanceRepository",
    "DashboardStats",
    "load_dashboard",
    "Settings",
    "load_settings",
]
