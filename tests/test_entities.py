#!/usr/bin/env python3
"""Tests for FuelEntry, Repair and MaintenanceItem classes."""

from carjournal import FuelEntry, MaintenanceItem, Repair


class TestFuelEntry:
    """Tests for FuelEntry class."""

    def test_from_row(self):
        """All columns are mapped onto attributes."""
        entry = FuelEntry.from_row({
            "id": 3,
            "date": "2025-01-15",
            "kilometers": 15230.0,
            "liters": 42.5,
            "price_per_liter": 1.8,
            "total_cost": 76.5,
            "notes": "Shell",
        })
        assert entry.id == 3
        assert entry.date == "2025-01-15"
        assert entry.kilometers == 15230.0
        assert entry.liters == 42.5
        assert entry.price_per_liter == 1.8
        assert entry.total_cost == 76.5
        assert entry.notes == "Shell"

    def test_optional_attributes_default_to_none(self):
        entry = FuelEntry("2025-01-15", 100, 5, 2, 10)
        assert entry.id is None
        assert entry.notes is None


class TestRepair:
    """Tests for Repair class."""

    def test_from_row_without_notes_column(self):
        """Rows selected without notes still load."""
        repair = Repair.from_row({"id": 1, "date": "2025-02-01", "description": "Brakes", "cost": 250})
        assert repair.description == "Brakes"
        assert repair.cost == 250
        assert repair.notes is None


class TestMaintenanceItem:
    """Tests for MaintenanceItem class."""

    def test_due_km_from_interval(self):
        """Distance-based item is due at last service + interval."""
        item = MaintenanceItem("Oil Change", interval_km=10000, last_maintenance_km=9000)
        assert item.is_distance_based
        assert item.due_km == 19000

    def test_due_km_interval_without_last_service(self):
        item = MaintenanceItem("Oil Change", interval_km=10000)
        assert item.due_km == 10000

    def test_due_km_from_next_due_km(self):
        item = MaintenanceItem("Timing belt", next_due_km=120000)
        assert not item.is_distance_based
        assert item.due_km == 120000

    def test_due_km_none_for_date_only(self):
        item = MaintenanceItem("Inspection", next_due_date="2026-05-01")
        assert item.due_km is None

    def test_null_completed_is_false(self):
        """Rows from databases predating the completed column load as active."""
        item = MaintenanceItem.from_row({"id": 1, "type": "Tires", "completed": None})
        assert item.completed is False

    def test_completed_flag_from_integer(self):
        item = MaintenanceItem.from_row({"id": 1, "type": "Tires", "completed": 1})
        assert item.completed is True

    def test_empty_description_loads_as_none(self):
        item = MaintenanceItem.from_row({"id": 1, "type": "Tires", "description": ""})
        assert item.description is None
