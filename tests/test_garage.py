#!/usr/bin/env python3
"""Tests for the garage CLI: formatting helpers, part parsing and commands."""

import argparse
import shutil
from datetime import date
from pathlib import Path

import pytest

import garage
from garage import (
    format_cost,
    format_days,
    format_km,
    main,
    make_history_table,
    make_reminder_table,
    parse_part,
    truncate,
)
from motolog import (
    AdvisoryError,
    FuelLog,
    Reminder,
    ReminderType,
    ServiceRecord,
    TripAdvisor,
    load_vehicle,
)

SAMPLE = Path(__file__).parent.parent / "vehicles" / "pulsar.yaml"

ACTIVE_TRIP_YAML = """
bike:
  name: Red Pulsar
  make: Bajaj
  model: Pulsar 220F
  year: 2021
  engineCc: 126-250
trips:
  - id: t1
    destination: Mustang
    start: '2026-10-05'
    estimatedDistance: 450
    status: active
"""


@pytest.fixture
def vehicle_file(tmp_path):
    path = tmp_path / "pulsar.yaml"
    shutil.copy(SAMPLE, path)
    return path


@pytest.fixture(autouse=True)
def local_advisor(monkeypatch):
    monkeypatch.delenv("MOTOLOG_ADVISOR_URL", raising=False)


# =============================================================================
# Formatting helpers
# =============================================================================


class TestFormatKm:
    """Tests for format_km."""

    def test_formats_number(self):
        assert format_km(11900) == "11,900"
        assert format_km(0) == "0"

    def test_none_returns_dash(self):
        assert format_km(None) == "-"


class TestFormatCost:
    """Tests for format_cost."""

    def test_formats_number(self):
        assert format_cost(2150) == "Rs. 2,150.00"
        assert format_cost(0) == "Rs. 0.00"

    def test_none_returns_dash(self):
        assert format_cost(None) == "-"


class TestFormatDays:
    """Tests for format_days."""

    def test_unknown(self):
        assert format_days(None) == "-"

    def test_due(self):
        assert format_days(0) == "due"

    def test_days(self):
        assert format_days(12) == "12d"


class TestTruncate:
    """Tests for truncate."""

    def test_short_text_unchanged(self):
        assert truncate("hello", 10) == "hello"

    def test_long_text_truncated(self):
        assert truncate("hello world foo bar", 10) == "hello w..."

    def test_none_returns_dash(self):
        assert truncate(None) == "-"


class TestTables:
    """Tests for table row builders."""

    def test_reminder_row(self):
        reminder = Reminder("Engine Oil", ReminderType.KM, 1500, 3000, 50, False,
                            remaining_days=30, estimated_due_date=date(2026, 10, 31))
        assert make_reminder_table([reminder]) == [
            ["Engine Oil", "1,500 / 3,000 KM", "50%", "30d", "2026-10-31"]
        ]

    def test_history_rows(self):
        entries = [
            ServiceRecord("s1", "2026-06-05", 10100, "General Service", labor_cost=500),
            FuelLog("f1", "2026-06-02", 10020, 12.5, 2150, notes="Kalanki"),
        ]
        assert make_history_table(entries) == [
            ["2026-06-05", "10,100", "service", "General Service", "Rs. 500.00", "-"],
            ["2026-06-02", "10,020", "fuel", "12.5 L (full)", "Rs. 2,150.00", "Kalanki"],
        ]


# =============================================================================
# Part parsing
# =============================================================================


class TestParsePart:
    """Tests for parse_part."""

    def test_full_format(self):
        part = parse_part("Engine Oil:850:1:km=3000")
        assert part.name == "Engine Oil"
        assert part.unit_cost == 850
        assert part.quantity == 1
        assert part.reminder_type == ReminderType.KM
        assert part.reminder_value == 3000

    def test_days_reminder_without_quantity(self):
        part = parse_part("Air Filter:400:days=180")
        assert part.quantity == 1
        assert part.reminder_type == ReminderType.DAYS

    def test_name_and_cost_only(self):
        part = parse_part("Washing:200")
        assert not part.has_reminder

    @pytest.mark.parametrize("text", ["Washing", "Oil:abc", "Oil:100:weeks=2", "Oil:100:x"])
    def test_invalid(self, text):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_part(text)


# =============================================================================
# Commands
# =============================================================================


class FailingAdvisor(TripAdvisor):
    def advise(self, request):
        raise AdvisoryError("Advisory request failed: timed out")


class TestCommands:
    """Tests for main() and the subcommands."""

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.yaml"), "status"]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_status(self, vehicle_file, capsys):
        assert main([str(vehicle_file), "status"]) == 0
        out = capsys.readouterr().out
        assert "Red Pulsar (2021 Bajaj Pulsar 220F)" in out
        assert "Next service: 2026-11-04 (34d)" in out
        assert "Tasks: Chain Lubrication" in out

    def test_stats(self, vehicle_file, capsys):
        assert main([str(vehicle_file), "stats"]) == 0
        out = capsys.readouterr().out
        assert "Condition: Solid Rider" in out
        assert "Rs. 8,738.00" in out

    def test_history_filtered(self, vehicle_file, capsys):
        assert main([str(vehicle_file), "history", "--kind", "service"]) == 0
        out = capsys.readouterr().out
        assert "Showing: 2 entries" in out
        assert "Chain cleaning" in out

    def test_trip_check(self, vehicle_file, capsys):
        argv = [str(vehicle_file), "trip-check", "--destination", "Mustang",
                "--distance", "450", "--start", "2026-10-05"]
        assert main(argv) == 0
        out = capsys.readouterr().out
        assert "Trip: Mustang on 2026-10-05" in out
        assert "Engine Oil" in out

    def test_trip_check_needs_a_trip(self, vehicle_file, capsys):
        assert main([str(vehicle_file), "trip-check", "--destination", "Mustang"]) == 1
        assert main([str(vehicle_file), "trip-check", "--trip-id", "nope"]) == 1

    def test_trip_check_bad_start_date(self, vehicle_file, capsys):
        argv = [str(vehicle_file), "trip-check", "--destination", "Mustang",
                "--distance", "450", "--start", "tomorrow"]
        assert main(argv) == 1
        assert "Error: Invalid start date 'tomorrow'" in capsys.readouterr().out

    def test_trip_check_advisor_failure(self, vehicle_file, capsys, monkeypatch):
        monkeypatch.setattr(garage, "get_trip_advisor", lambda settings: FailingAdvisor())
        assert main([str(vehicle_file), "trip-check", "--trip-id", "t1"]) == 1
        assert "Error: Advisory request failed" in capsys.readouterr().out

    def test_log_fuel_dry_run(self, vehicle_file):
        before = vehicle_file.read_text()
        assert main([str(vehicle_file), "log-fuel", "12000", "6", "1032", "--dry-run"]) == 0
        assert vehicle_file.read_text() == before

    def test_log_fuel(self, vehicle_file):
        argv = [str(vehicle_file), "log-fuel", "12000", "6", "1032", "--date", "2026-10-02"]
        assert main(argv) == 0
        log = load_vehicle(vehicle_file).fuel_logs[-1]
        assert log.odometer == 12000
        assert log.price_per_liter == 172

    def test_log_fuel_adds_to_active_trip(self, tmp_path, capsys):
        path = tmp_path / "trip.yaml"
        path.write_text(ACTIVE_TRIP_YAML)
        assert main([str(path), "log-fuel", "12000", "6", "1032"]) == 0
        assert "Added to trip wallet: Mustang" in capsys.readouterr().out
        trip = load_vehicle(path).active_trip
        assert [(e.item, e.cost) for e in trip.expenses] == [("Fuel (6L)", 1032)]

    def test_log_service(self, vehicle_file):
        argv = [str(vehicle_file), "log-service", "General Service", "12000",
                "--labor", "500", "--part", "Engine Oil:850:1:km=3000",
                "--date", "2026-10-02"]
        assert main(argv) == 0
        service = load_vehicle(vehicle_file).services[-1]
        assert service.total_cost == 1350
        assert service.parts[0].has_reminder

    def test_remind_requires_due(self, vehicle_file, capsys):
        assert main([str(vehicle_file), "remind", "--notes", "PUC"]) == 1

    def test_remind(self, vehicle_file):
        argv = [str(vehicle_file), "remind", "--notes", "PUC", "--due-odo", "13000"]
        assert main(argv) == 0
        assert load_vehicle(vehicle_file).reminders[-1].due_odometer == 13000

    def test_update_odo(self, vehicle_file):
        assert main([str(vehicle_file), "update-odo", "12600"]) == 0
        assert load_vehicle(vehicle_file).current_odometer == 12600
