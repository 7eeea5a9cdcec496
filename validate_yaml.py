#!/usr/bin/env python3
"""
Validate vehicle YAML files.

Checks each file against schema.yaml, then applies the record rules a
schema cannot express: unique ids per collection, at most one active
trip, and trip odometers that do not run backwards.
"""
import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List

import yaml
from jsonschema import validate, ValidationError

from motolog.config import Settings
from motolog.loader import COLLECTIONS
from motolog.status import TripStatus


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def check_unique_ids(data: Dict[str, Any]) -> List[str]:
    errors = []
    for collection in COLLECTIONS:
        seen = set()
        for record in data.get(collection) or []:
            record_id = str(record.get("id"))
            if record_id in seen:
                errors.append(f"Duplicate id in {collection}: {record_id}")
            seen.add(record_id)
    return errors


def check_single_active_trip(data: Dict[str, Any]) -> List[str]:
    """At most one trip may be active at a time."""
    trips = data.get("trips") or []
    active = [str(t.get("id")) for t in trips if t.get("status") == TripStatus.ACTIVE.value]
    if len(active) > 1:
        return [f"More than one active trip: {', '.join(active)}"]
    return []


def check_trip_odometers(data: Dict[str, Any]) -> List[str]:
    errors = []
    for trip in data.get("trips") or []:
        start, end = trip.get("startOdometer"), trip.get("endOdometer")
        if start is not None and end is not None and end < start:
            errors.append(f"Trip {trip.get('id')}: endOdometer {end} is below startOdometer {start}")
    return errors


def validate_vehicle_file(filepath: Path, schema: dict) -> List[str]:
    """Validate a single vehicle YAML file. Returns list of errors."""
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=data, schema=schema)
    except yaml.YAMLError as e:
        return [f"YAML parse error: {e}"]
    except ValidationError as e:
        errors = [f"Schema validation error: {e.message}"]
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
        return errors
    except OSError as e:
        return [f"Error: {e}"]

    return check_unique_ids(data) + check_single_active_trip(data) + check_trip_odometers(data)


def find_vehicle_files(directory: Path) -> List[Path]:
    return sorted(list(directory.glob("*.yaml")) + list(directory.glob("*.yml")))


def main(argv=None):
    """Validate the given files, or every vehicle file in the vehicles directory."""
    parser = argparse.ArgumentParser(description="Validate vehicle YAML files")
    parser.add_argument(
        "files", nargs="*", type=Path,
        help="Files to check (default: all files in MOTOLOG_VEHICLES_DIR)",
    )
    args = parser.parse_args(argv)

    if args.files:
        yaml_files = args.files
    else:
        vehicles_dir = Settings().vehicles_dir
        if not vehicles_dir.exists():
            print(f"Error: vehicles directory not found: {vehicles_dir}")
            return 1
        yaml_files = find_vehicle_files(vehicles_dir)
        if not yaml_files:
            print(f"Warning: No YAML files found in {vehicles_dir}")
            return 0

    schema = load_schema()
    all_valid = True
    for filepath in yaml_files:
        errors = validate_vehicle_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
