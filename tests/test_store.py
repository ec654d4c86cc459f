#!/usr/bin/env python3
"""Tests for the record store and its lifecycle."""
import asyncio

import aiosqlite
import pytest

from carjournal import QueryError, Store, StoreNotInitialized, StoreState
from carjournal import schema


class TestEnsureSchema:
    """Tests for Store.ensure_schema."""

    def test_creates_tables(self, with_store):
        async def scenario(store):
            return await store.query(
                "SELECT name FROM sqlite_master WHERE type = 'table' AND name != 'sqlite_sequence' "
                "ORDER BY name"
            )

        rows = with_store(scenario)
        assert [r["name"] for r in rows] == ["fuel_entries", "maintenance", "repairs"]

    def test_second_call_is_noop(self, with_store):
        """Calling twice does not raise and leaves rows alone."""
        async def scenario(store):
            await store.execute(
                "INSERT INTO repairs (date, description, cost) VALUES (?, ?, ?)",
                ("2025-01-01", "Brakes", 250.0),
            )
            await store.ensure_schema()
            assert store.state is StoreState.READY
            return await store.query("SELECT description, cost FROM repairs")

        assert with_store(scenario) == [{"description": "Brakes", "cost": 250.0}]

    def test_reopen_existing_file_keeps_data(self, db_path):
        async def first():
            store = Store(db_path)
            await store.ensure_schema()
            await store.execute(
                "INSERT INTO repairs (date, description, cost) VALUES (?, ?, ?)",
                ("2025-01-01", "Brakes", 250.0),
            )
            await store.close()

        async def second():
            store = Store(db_path)
            await store.ensure_schema()
            try:
                return await store.query("SELECT id, description FROM repairs")
            finally:
                await store.close()

        asyncio.run(first())
        assert asyncio.run(second()) == [{"id": 1, "description": "Brakes"}]

    def test_closed_store_cannot_be_reopened(self, db_path):
        async def scenario():
            store = Store(db_path)
            await store.ensure_schema()
            await store.close()
            with pytest.raises(StoreNotInitialized):
                await store.ensure_schema()

        asyncio.run(scenario())


class TestExecuteAndQuery:
    """Tests for Store.execute and Store.query."""

    def test_before_ensure_schema(self, with_store):
        async def scenario(store):
            assert store.state is StoreState.NEW
            with pytest.raises(StoreNotInitialized):
                await store.execute("INSERT INTO repairs (date, description, cost) VALUES ('d', 'x', 1)")
            with pytest.raises(StoreNotInitialized):
                await store.query("SELECT * FROM repairs")

        with_store(scenario, initialize=False)

    def test_execute_returns_inserted_id_and_rowcount(self, with_store):
        async def scenario(store):
            first = await store.execute(
                "INSERT INTO repairs (date, description, cost) VALUES (?, ?, ?)",
                ("2025-01-01", "Brakes", 250.0),
            )
            second = await store.execute(
                "INSERT INTO repairs (date, description, cost) VALUES (?, ?, ?)",
                ("2025-01-02", "Wipers", 20.0),
            )
            update = await store.execute("UPDATE repairs SET notes = ?", ("checked",))
            return first, second, update

        first, second, update = with_store(scenario)
        assert (first.rows_affected, first.inserted_id) == (1, 1)
        assert second.inserted_id == 2
        assert update.rows_affected == 2

    def test_query_rows_are_ordered_mappings(self, with_store):
        async def scenario(store):
            await store.execute(
                "INSERT INTO repairs (date, description, cost) VALUES (?, ?, ?)",
                ("2025-01-01", "Brakes", 250.0),
            )
            return await store.query("SELECT cost, description, id FROM repairs")

        rows = with_store(scenario)
        assert list(rows[0].keys()) == ["cost", "description", "id"]

    def test_empty_result(self, with_store):
        async def scenario(store):
            return await store.query("SELECT * FROM fuel_entries")

        assert with_store(scenario) == []

    def test_parameters_are_bound_not_interpolated(self, with_store):
        """Text that looks like SQL is stored verbatim."""
        hostile = "x'); DROP TABLE repairs; --"

        async def scenario(store):
            await store.execute(
                "INSERT INTO repairs (date, description, cost) VALUES (?, ?, ?)",
                ("2025-01-01", hostile, 1.0),
            )
            return await store.query("SELECT description FROM repairs WHERE description = ?", (hostile,))

        assert with_store(scenario) == [{"description": hostile}]

    def test_constraint_violation_is_query_error(self, with_store):
        async def scenario(store):
            with pytest.raises(QueryError) as exc:
                await store.execute(
                    "INSERT INTO repairs (date, description, cost) VALUES (?, ?, ?)",
                    ("2025-01-01", None, 1.0),
                )
            assert isinstance(exc.value.__cause__, aiosqlite.IntegrityError)
            # The store is still usable afterwards
            return await store.query("SELECT COUNT(*) AS n FROM repairs")

        assert with_store(scenario) == [{"n": 0}]

    def test_malformed_sql_is_query_error(self, with_store):
        async def scenario(store):
            with pytest.raises(QueryError) as exc:
                await store.query("SELEC * FROM repairs")
            assert exc.value.sql == "SELEC * FROM repairs"

        with_store(scenario)

    def test_concurrent_operations_are_serialized(self, with_store):
        """Many writes issued at once all land, each with its own id."""
        async def scenario(store):
            results = await asyncio.gather(*[
                store.execute(
                    "INSERT INTO repairs (date, description, cost) VALUES (?, ?, ?)",
                    ("2025-01-01", f"repair {i}", float(i)),
                )
                for i in range(20)
            ])
            rows = await store.query("SELECT COUNT(*) AS n FROM repairs")
            return sorted(r.inserted_id for r in results), rows[0]["n"]

        ids, count = with_store(scenario)
        assert ids == list(range(1, 21))
        assert count == 20


class TestResetAll:
    """Tests for Store.reset_all."""

    def test_reset_empties_tables_and_restarts_ids(self, with_store):
        async def scenario(store):
            for i in range(3):
                await store.execute(
                    "INSERT INTO fuel_entries (date, kilometers, liters, price_per_liter, total_cost) "
                    "VALUES (?, ?, ?, ?, ?)",
                    ("2025-01-01", 100.0 * i, 10.0, 2.0, 20.0),
                )
            await store.execute(
                "INSERT INTO repairs (date, description, cost) VALUES (?, ?, ?)",
                ("2025-01-01", "Brakes", 250.0),
            )
            await store.reset_all()
            lists = [
                await store.query("SELECT * FROM fuel_entries"),
                await store.query("SELECT * FROM repairs"),
                await store.query("SELECT * FROM maintenance"),
            ]
            result = await store.execute(
                "INSERT INTO fuel_entries (date, kilometers, liters, price_per_liter, total_cost) "
                "VALUES (?, ?, ?, ?, ?)",
                ("2025-01-01", 100.0, 10.0, 2.0, 20.0),
            )
            return lists, result.inserted_id

        lists, first_id = with_store(scenario)
        assert lists == [[], [], []]
        assert first_id == 1

    def test_failed_recreate_leaves_store_failed(self, with_store, monkeypatch):
        async def broken_create(conn):
            raise aiosqlite.OperationalError("disk I/O error")

        async def scenario(store):
            monkeypatch.setattr(schema, "create_tables", broken_create)
            with pytest.raises(QueryError):
                await store.reset_all()
            assert store.state is StoreState.FAILED
            with pytest.raises(StoreNotInitialized):
                await store.query("SELECT * FROM repairs")
            with pytest.raises(StoreNotInitialized):
                await store.execute("INSERT INTO repairs (date, description, cost) VALUES ('d', 'x', 1)")

        with_store(scenario)

    def test_ensure_schema_recovers_failed_store(self, with_store, monkeypatch):
        original_create = schema.create_tables

        async def broken_create(conn):
            raise aiosqlite.OperationalError("disk I/O error")

        async def scenario(store):
            monkeypatch.setattr(schema, "create_tables", broken_create)
            with pytest.raises(QueryError):
                await store.reset_all()
            monkeypatch.setattr(schema, "create_tables", original_create)
            await store.ensure_schema()
            return await store.query("SELECT * FROM repairs")

        assert with_store(scenario) == []

    def test_reset_before_ensure_schema(self, with_store):
        async def scenario(store):
            with pytest.raises(StoreNotInitialized):
                await store.reset_all()

        with_store(scenario, initialize=False)
