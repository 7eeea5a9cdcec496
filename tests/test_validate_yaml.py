#!/usr/bin/env python3
"""Tests for validate_yaml schema validation."""

from pathlib import Path

from validate_yaml import (
    check_single_active_trip,
    check_trip_odometers,
    check_unique_ids,
    load_schema,
    main,
    validate_vehicle_file,
)

SAMPLE = Path(__file__).parent.parent / "vehicles" / "pulsar.yaml"

BIKE = """
bike:
  make: Bajaj
  model: Pulsar 220F
  year: 2021
  engineCc: 126-250
"""


class TestLoadSchema:
    """Tests for load_schema function."""

    def test_returns_dict(self):
        schema = load_schema()
        assert isinstance(schema, dict)

    def test_has_expected_structure(self):
        properties = load_schema()["properties"]
        assert "bike" in properties
        assert "fuelLogs" in properties
        assert "services" in properties


class TestValidateVehicleFile:
    """Tests for validate_vehicle_file function."""

    def test_sample_vehicle_is_valid(self):
        assert validate_vehicle_file(SAMPLE, load_schema()) == []

    def test_valid_minimal_returns_no_errors(self, tmp_path):
        """Only the bike is required."""
        path = tmp_path / "valid.yaml"
        path.write_text(BIKE)
        assert validate_vehicle_file(path, load_schema()) == []

    def test_bare_dates_are_accepted(self, tmp_path):
        path = tmp_path / "dates.yaml"
        path.write_text(BIKE + """
fuelLogs:
  - id: f1
    date: 2026-06-02
    odometer: 10020
    liters: 12.5
    amount: 2150
""")
        assert validate_vehicle_file(path, load_schema()) == []

    def test_unknown_engine_class(self, tmp_path):
        path = tmp_path / "invalid.yaml"
        path.write_text(BIKE.replace("126-250", "220"))
        errors = validate_vehicle_file(path, load_schema())
        assert any("Schema validation" in e for e in errors)

    def test_missing_required_bike_field(self, tmp_path):
        path = tmp_path / "invalid.yaml"
        path.write_text("bike:\n  make: Bajaj\n  model: Pulsar\n  year: 2021\n")
        errors = validate_vehicle_file(path, load_schema())
        assert len(errors) >= 1
        assert any("engineCc" in e for e in errors)

    def test_reminder_needs_a_due_field(self, tmp_path):
        path = tmp_path / "invalid.yaml"
        path.write_text(BIKE + """
reminders:
  - id: r1
    notes: Renew insurance
""")
        errors = validate_vehicle_file(path, load_schema())
        assert any("Schema validation" in e for e in errors)

    def test_unknown_top_level_key(self, tmp_path):
        path = tmp_path / "invalid.yaml"
        path.write_text(BIKE + "\nhistory: []\n")
        assert validate_vehicle_file(path, load_schema()) != []

    def test_two_active_trips(self, tmp_path):
        path = tmp_path / "trips.yaml"
        path.write_text(BIKE + """
trips:
  - {id: t1, destination: Pokhara, start: '2026-09-10', estimatedDistance: 400, status: active}
  - {id: t2, destination: Mustang, start: '2026-10-05', estimatedDistance: 450, status: active}
""")
        errors = validate_vehicle_file(path, load_schema())
        assert errors == ["More than one active trip: t1, t2"]

    def test_invalid_yaml_returns_parse_error(self, tmp_path):
        """Invalid YAML syntax returns YAML parse error."""
        path = tmp_path / "bad.yaml"
        path.write_text("""
bike:
  make: Bajaj
  invalid: [unclosed
""")
        errors = validate_vehicle_file(path, load_schema())
        assert any("YAML" in e for e in errors)

    def test_nonexistent_file_returns_errors(self, tmp_path):
        """Nonexistent file returns error (caught by validate_vehicle_file)."""
        errors = validate_vehicle_file(tmp_path / "does_not_exist.yaml", load_schema())
        assert len(errors) == 1
        assert errors[0].startswith("Error:")


class TestCheckSingleActiveTrip:
    """Tests for check_single_active_trip."""

    def test_no_trips(self):
        assert check_single_active_trip({}) == []

    def test_one_active(self):
        trips = [{"id": "t1", "status": "active"}, {"id": "t2", "status": "completed"}]
        assert check_single_active_trip({"trips": trips}) == []


class TestRecordChecks:
    """Tests for the checks applied after schema validation."""

    def test_duplicate_ids(self):
        data = {"fuelLogs": [{"id": "f1"}, {"id": "f1"}], "services": [{"id": "f1"}]}
        assert check_unique_ids(data) == ["Duplicate id in fuelLogs: f1"]

    def test_trip_odometer_backwards(self):
        data = {"trips": [{"id": "t1", "startOdometer": 11890, "endOdometer": 11520}]}
        assert check_trip_odometers(data) == [
            "Trip t1: endOdometer 11520 is below startOdometer 11890"
        ]

    def test_unfinished_trip(self):
        assert check_trip_odometers({"trips": [{"id": "t1", "startOdometer": 11520}]}) == []


class TestMain:
    """Tests for the validate_yaml entry point."""

    def test_explicit_files(self, tmp_path, capsys):
        good = tmp_path / "good.yaml"
        good.write_text(BIKE)
        bad = tmp_path / "bad.yaml"
        bad.write_text("bike: {}\n")
        assert main([str(good), str(bad)]) == 1
        out = capsys.readouterr().out
        assert "OK: good.yaml" in out
        assert "FAIL: bad.yaml" in out

    def test_vehicles_dir_from_environment(self, tmp_path, monkeypatch, capsys):
        (tmp_path / "pulsar.yaml").write_text(SAMPLE.read_text())
        monkeypatch.setenv("MOTOLOG_VEHICLES_DIR", str(tmp_path))
        assert main([]) == 0
        assert "OK: pulsar.yaml" in capsys.readouterr().out

    def test_empty_directory(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("MOTOLOG_VEHICLES_DIR", str(tmp_path))
        assert main([]) == 0
        assert "No YAML files" in capsys.readouterr().out
