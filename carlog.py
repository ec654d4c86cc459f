#!/usr/bin/env python3
"""
Command-line front end for the car journal.

Commands:
  init          - Create or upgrade the journal database
  fuel add|list - Record fill-ups, list them with consumption
  repair add|list
  maint add|list|done
  stats         - Dashboard totals
  reset         - Delete all data and recreate the tables
"""

import argparse
import asyncio
import logging
import sys
from decimal import Decimal
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional, Tuple

from carjournal import (
    ConfigError,
    FuelEntry,
    FuelOrder,
    FuelRepository,
    JournalError,
    MaintenanceDue,
    MaintenanceRepository,
    Repair,
    RepairRepository,
    Settings,
    Store,
    consumption_series,
    evaluate_maintenance,
    load_dashboard,
    load_settings,
    round_half_up,
    total_fuel_cost,
    total_repair_cost,
)

logger = logging.getLogger("carlog")

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format a distance for display, one decimal place."""
    if km is None:
        return "-"
    return f"{round_half_up(km, 1):,}"


def format_cost(cost: Optional[float]) -> str:
    """Format money for display, two decimal places."""
    if cost is None:
        return "-"
    return f"${round_half_up(cost, 2):,}"


def format_consumption(value: Optional[Decimal]) -> str:
    """Format L/100km; None is shown as N/A."""
    if value is None:
        return "N/A"
    return f"{round_half_up(value, 1)} L/100km"


def format_remaining(due: MaintenanceDue) -> str:
    """Format remaining distance/time for a maintenance item."""
    parts = []
    if due.km_remaining is not None:
        parts.append(f"{round_half_up(due.km_remaining, 0):,} km")
    if due.days_remaining is not None:
        parts.append(f"{due.days_remaining}d")
    return " / ".join(parts) if parts else "-"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


# =============================================================================
# Tables
# =============================================================================


def make_fuel_table(rows: List[Tuple[FuelEntry, Optional[Decimal]]]) -> List[List[str]]:
    """Convert (entry, consumption) pairs to table rows."""
    return [
        [
            str(entry.id),
            entry.date,
            format_km(entry.kilometers),
            f"{round_half_up(entry.liters, 2)}",
            format_cost(entry.price_per_liter),
            format_cost(entry.total_cost),
            format_consumption(consumption),
            truncate(entry.notes),
        ]
        for entry, consumption in rows
    ]


def make_repair_table(repairs: List[Repair]) -> List[List[str]]:
    """Convert repairs to table rows."""
    return [
        [str(r.id), r.date, truncate(r.description), format_cost(r.cost), truncate(r.notes)]
        for r in repairs
    ]


def make_maintenance_table(dues: List[MaintenanceDue]) -> List[List[str]]:
    """Convert maintenance due information to table rows."""
    rows = []
    for due in dues:
        item = due.item
        rows.append(
            [
                str(item.id),
                item.type,
                due.status.name.replace("_", " "),
                format_km(item.last_maintenance_km),
                format_km(due.due_km),
                item.next_due_date or "-",
                format_remaining(due),
                truncate(item.description or item.notes),
            ]
        )
    return rows


def read_fields(args, names: List[str]) -> dict:
    """Collect the given attributes from parsed args, skipping unset ones."""
    return {name: getattr(args, name) for name in names if getattr(args, name) is not None}


# =============================================================================
# Commands
# =============================================================================


async def cmd_init(store: Store, settings: Settings, args) -> int:
    print(f"Journal ready: {store.path}")
    return 0


async def cmd_fuel(store: Store, settings: Settings, args) -> int:
    fuel = FuelRepository(store)

    if args.action == "add":
        entry = await fuel.insert(
            read_fields(args, ["date", "kilometers", "liters", "price_per_liter", "notes"])
        )
        print(f"Added fuel entry {entry.id}: {format_km(entry.kilometers)} km, "
              f"{entry.liters} L, total {format_cost(entry.total_cost)}")
        return 0

    entries = await fuel.list(FuelOrder.DISPLAY)
    if not entries:
        print("No fuel entries found.")
        return 0
    print(f"Fuel entries: {len(entries)}")
    print(f"Total fuel cost: {format_cost(total_fuel_cost(entries))}")
    print()
    headers = ["ID", "Date", "Km", "Liters", "Price/L", "Total", "Consumption", "Notes"]
    print(tabulate(make_fuel_table(consumption_series(entries)), headers=headers, tablefmt="simple"))
    return 0


async def cmd_repair(store: Store, settings: Settings, args) -> int:
    repairs = RepairRepository(store)

    if args.action == "add":
        repair = await repairs.insert(read_fields(args, ["date", "description", "cost", "notes"]))
        print(f"Added repair {repair.id}: {repair.description} ({format_cost(repair.cost)})")
        return 0

    rows = await repairs.list()
    if not rows:
        print("No repairs found.")
        return 0
    print(f"Total repair cost: {format_cost(total_repair_cost(rows))}")
    print()
    headers = ["ID", "Date", "Description", "Cost", "Notes"]
    print(tabulate(make_repair_table(rows), headers=headers, tablefmt="simple"))
    return 0


async def cmd_maint(store: Store, settings: Settings, args) -> int:
    maintenance = MaintenanceRepository(store)

    if args.action == "add":
        item = await maintenance.insert(read_fields(args, [
            "date", "type", "description", "interval_km", "last_maintenance_km",
            "next_due_km", "next_due_date", "notes",
        ]))
        print(f"Added maintenance item {item.id}: {item.type}")
        return 0

    if args.action == "done":
        item = await maintenance.mark_done(args.id, odometer=args.odometer)
        state = "completed" if item.completed else f"next due at {format_km(item.next_due_km)} km"
        print(f"Maintenance item {item.id} ({item.type}) {state}.")
        return 0

    items = await maintenance.list()
    if not items:
        print("No maintenance items found.")
        return 0
    odometer = await maintenance.current_odometer(FuelRepository(store))
    print(f"Current odometer: {format_km(odometer)} km")
    print()
    dues = [
        evaluate_maintenance(
            item,
            odometer,
            due_soon_km=settings.due_soon_km,
            due_soon_days=settings.due_soon_days,
        )
        for item in items
    ]
    headers = ["ID", "Type", "Status", "Last (km)", "Due (km)", "Due (date)", "Remaining", "Notes"]
    print(tabulate(make_maintenance_table(dues), headers=headers, tablefmt="simple"))
    return 0


async def cmd_stats(store: Store, settings: Settings, args) -> int:
    stats = (await load_dashboard(store)).display()
    rows = [
        ["Total kilometers", f"{stats['total_km']} km"],
        ["Total fuel cost", f"${stats['total_fuel_cost']}"],
        ["Average consumption", f"{stats['average_consumption']} L/100km"],
        ["Total repairs", f"${stats['total_repair_cost']}"],
    ]
    print(tabulate(rows, tablefmt="simple"))
    return 0


async def cmd_reset(store: Store, settings: Settings, args) -> int:
    if not args.yes:
        print("This deletes all fuel entries, repairs and maintenance items.")
        print("Re-run with --yes to confirm.")
        return 1
    try:
        await store.reset_all()
    except JournalError as e:
        print(f"Error: reset failed, data presumed unchanged: {e}")
        return 1
    print("Database has been reset.")
    return 0


COMMANDS = {
    "init": cmd_init,
    "fuel": cmd_fuel,
    "repair": cmd_repair,
    "maint": cmd_maint,
    "stats": cmd_stats,
    "reset": cmd_reset,
}


async def run(args, settings: Settings) -> int:
    """Open the journal, dispatch one command, close the journal."""
    store = Store(settings.database)
    try:
        await store.ensure_schema()
        return await COMMANDS[args.command](store, settings, args)
    finally:
        await store.close()


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vehicle logbook: fuel, repairs and maintenance",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s fuel add --kilometers 15230 --liters 42.5 --price-per-liter 1.79
  %(prog)s fuel list
  %(prog)s repair add "Replace wiper motor" 120
  %(prog)s maint add "Oil Change" --interval-km 15000 --last-maintenance-km 9000
  %(prog)s maint done 3 --odometer 24000
  %(prog)s stats
  %(prog)s --db other.db reset --yes
""",
    )
    parser.add_argument("--db", type=str, help="Path to the journal database")
    parser.add_argument("--config", type=Path, help="Path to a YAML config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init", help="Create or upgrade the journal database")

    # Fuel
    fuel_parser = subparsers.add_parser("fuel", help="Fuel fill-ups")
    fuel_sub = fuel_parser.add_subparsers(dest="action", required=True)
    fuel_add = fuel_sub.add_parser("add", help="Record a fill-up")
    fuel_add.add_argument("--date", type=str, help="Date in YYYY-MM-DD format (default: today)")
    fuel_add.add_argument("--kilometers", type=str, required=True, help="Odometer reading")
    fuel_add.add_argument("--liters", type=str, required=True, help="Fuel added")
    fuel_add.add_argument("--price-per-liter", type=str, required=True, help="Price per liter")
    fuel_add.add_argument("--notes", type=str, help="Notes about the fill-up")
    fuel_sub.add_parser("list", help="List fill-ups with consumption")

    # Repair
    repair_parser = subparsers.add_parser("repair", help="Repairs")
    repair_sub = repair_parser.add_subparsers(dest="action", required=True)
    repair_add = repair_sub.add_parser("add", help="Record a repair")
    repair_add.add_argument("description", type=str, help="What was repaired")
    repair_add.add_argument("cost", type=str, help="Cost of the repair")
    repair_add.add_argument("--date", type=str, help="Date in YYYY-MM-DD format (default: today)")
    repair_add.add_argument("--notes", type=str, help="Notes about the repair")
    repair_sub.add_parser("list", help="List repairs")

    # Maintenance
    maint_parser = subparsers.add_parser("maint", help="Maintenance items")
    maint_sub = maint_parser.add_subparsers(dest="action", required=True)
    maint_add = maint_sub.add_parser("add", help="Add a maintenance item")
    maint_add.add_argument("type", type=str, help="Kind of service (e.g., 'Oil Change')")
    maint_add.add_argument("--date", type=str, help="Date in YYYY-MM-DD format (default: today)")
    maint_add.add_argument("--description", type=str, help="Details of the service")
    maint_add.add_argument("--interval-km", type=str, help="Distance between services")
    maint_add.add_argument("--last-maintenance-km", type=str, help="Odometer at last service")
    maint_add.add_argument("--next-due-km", type=str, help="Odometer at which it is due")
    maint_add.add_argument("--next-due-date", type=str, help="Due date in YYYY-MM-DD format")
    maint_add.add_argument("--notes", type=str, help="Notes")
    maint_done = maint_sub.add_parser("done", help="Mark a maintenance item as done")
    maint_done.add_argument("id", type=int, help="Maintenance item ID")
    maint_done.add_argument("--odometer", type=float, help="Odometer at time of service")
    maint_sub.add_parser("list", help="List maintenance items and what is due")

    subparsers.add_parser("stats", help="Show dashboard totals")

    reset_parser = subparsers.add_parser("reset", help="Delete all data")
    reset_parser.add_argument("--yes", action="store_true", help="Confirm the reset")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"Error: {e}")
        return 1
    if args.db:
        settings.database = args.db

    logging.basicConfig(
        level=logging.INFO if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return asyncio.run(run(args, settings))
    except JournalError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
