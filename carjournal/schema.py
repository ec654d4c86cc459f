"""
Table definitions and additive migrations for the journal database.

The maintenance table reconciles two historical layouts: one tracking
services by distance interval (interval_km / last_maintenance_km) and one
tracking due dates with a done flag (next_due_date / completed). Older
databases are brought forward by adding the missing columns in place;
columns are never removed or retyped here. That requires a full reset.
"""

import logging
from typing import Dict, List, Tuple

import aiosqlite

from .errors import MigrationError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 2

TABLES = ("fuel_entries", "repairs", "maintenance")

_CREATE_SQL = {
    "fuel_entries": """
        CREATE TABLE IF NOT EXISTS fuel_entries (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            date TEXT NOT NULL,
            kilometers REAL NOT NULL,
            liters REAL NOT NULL,
            price_per_liter REAL NOT NULL,
            total_cost REAL NOT NULL,
            notes TEXT
        )
    """,
    "repairs": """
        CREATE TABLE IF NOT EXISTS repairs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            date TEXT NOT NULL,
            description TEXT NOT NULL,
            cost REAL NOT NULL,
            notes TEXT
        )
    """,
    "maintenance": """
        CREATE TABLE IF NOT EXISTS maintenance (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            date TEXT,
            type TEXT NOT NULL,
            description TEXT,
            next_due_date TEXT,
            next_due_km REAL,
            last_maintenance_km REAL,
            interval_km INTEGER,
            completed INTEGER DEFAULT 0,
            notes TEXT
        )
    """,
}

# Columns added after the first release, per table. Declarations must be
# valid for ALTER TABLE ADD COLUMN (no NOT NULL without a default).
ADDITIVE_COLUMNS: Dict[str, List[Tuple[str, str]]] = {
    "fuel_entries": [
        ("notes", "TEXT"),
    ],
    "repairs": [
        ("notes", "TEXT"),
    ],
    "maintenance": [
        ("date", "TEXT"),
        ("description", "TEXT"),
        ("next_due_date", "TEXT"),
        ("next_due_km", "REAL"),
        ("last_maintenance_km", "REAL"),
        ("interval_km", "INTEGER"),
        ("completed", "INTEGER DEFAULT 0"),
        ("notes", "TEXT"),
    ],
}


def is_duplicate_column(error: Exception) -> bool:
    """True if a driver error reports that the column being added already exists."""
    return "duplicate column" in str(error).lower()


async def create_tables(conn: aiosqlite.Connection) -> None:
    """Create any of the journal tables that do not exist yet."""
    for table in TABLES:
        await conn.execute(_CREATE_SQL[table])
    await conn.commit()
    logger.info("Tables ready: %s", ", ".join(TABLES))


async def add_column(
    conn: aiosqlite.Connection, table: str, column: str, declaration: str
) -> bool:
    """
    Add a column to an existing table.

    Returns True if the column was added, False if it was already there.
    Raises MigrationError for any other failure.
    """
    try:
        await conn.execute(f"ALTER TABLE {table} ADD COLUMN {column} {declaration}")
    except aiosqlite.OperationalError as e:
        if is_duplicate_column(e):
            return False
        raise MigrationError(f"Could not add {table}.{column}: {e}") from e
    logger.info("Added column %s.%s", table, column)
    return True


async def apply_migrations(conn: aiosqlite.Connection) -> List[str]:
    """
    Bring an older database forward by adding missing columns.

    Failures other than "duplicate column" are logged and skipped so the
    remaining columns are still attempted. Returns the qualified names of
    the columns that were added.
    """
    added = []
    failed = False
    for table, columns in ADDITIVE_COLUMNS.items():
        for column, declaration in columns:
            try:
                if await add_column(conn, table, column, declaration):
                    added.append(f"{table}.{column}")
            except MigrationError as e:
                failed = True
                logger.error("Migration failed, leaving schema as-is: %s", e)

    if not failed:
        await conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
    await conn.commit()
    return added


async def schema_version(conn: aiosqlite.Connection) -> int:
    """Return the schema version recorded in the database file."""
    async with conn.execute("PRAGMA user_version") as cursor:
        row = await cursor.fetchone()
    return row[0] if row else 0


async def drop_tables(conn: aiosqlite.Connection) -> None:
    """Drop every journal table. Row data is lost."""
    for table in TABLES:
        await conn.execute(f"DROP TABLE IF EXISTS {table}")
    await conn.commit()
    logger.info("Dropped tables: %s", ", ".join(TABLES))
