"""Shared fixtures for store-backed tests."""
import asyncio
import sqlite3

import pytest

from carjournal import Store


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "journal.db"


@pytest.fixture
def with_store(db_path):
    """
    Run an async scenario against a freshly initialized store.

    Usage: with_store(scenario) where scenario is `async def (store)`.
    The store is closed afterwards; the scenario's result is returned.
    """
    def runner(scenario, initialize=True):
        async def main():
            store = Store(db_path)
            if initialize:
                await store.ensure_schema()
            try:
                return await scenario(store)
            finally:
                await store.close()

        return asyncio.run(main())

    return runner


# Layout shipped by the first release: no interval or done-flag columns on
# maintenance, and description/date mandatory.
LEGACY_SCHEMA = """
CREATE TABLE fuel_entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date TEXT NOT NULL,
    kilometers REAL NOT NULL,
    liters REAL NOT NULL,
    price_per_liter REAL NOT NULL,
    total_cost REAL NOT NULL,
    notes TEXT
);
CREATE TABLE repairs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date TEXT NOT NULL,
    description TEXT NOT NULL,
    cost REAL NOT NULL,
    notes TEXT
);
CREATE TABLE maintenance (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date TEXT NOT NULL,
    type TEXT NOT NULL,
    description TEXT NOT NULL,
    next_due_date TEXT,
    next_due_km REAL,
    notes TEXT
);
INSERT INTO maintenance (date, type, description, next_due_date, next_due_km, notes)
VALUES ('2024-03-01', 'Oil Change', '5W-30', '2025-03-01', 25000, 'dealer');
"""


@pytest.fixture
def legacy_db(db_path):
    """A database file in the first-release layout, with one maintenance row."""
    conn = sqlite3.connect(db_path)
    conn.executescript(LEGACY_SCHEMA)
    conn.commit()
    conn.close()
    return db_path
