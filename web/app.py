"""Flask JSON API exposing bike stats, reminders and trip advisories."""

import logging
from dataclasses import asdict, is_dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any

from flask import Flask, abort, jsonify, request

from motolog import AdvisoryError, Trip, Vehicle
from motolog.calculations import parse_date
from motolog.config import Settings, configure_logging, get_trip_advisor
from motolog.loader import load_vehicle, save_current_odometer

settings = Settings()
configure_logging(settings)
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = settings.secret_key
app.config["VEHICLES_DIR"] = settings.vehicles_dir
app.config["TRIP_ADVISOR"] = None  # None: pick from settings on each request


def get_vehicle_files():
    """Get all vehicle YAML files."""
    return sorted(Path(app.config["VEHICLES_DIR"]).glob("*.yaml"))


def get_vehicle_id(path: Path) -> str:
    """Extract vehicle ID from path (filename without extension)."""
    return path.stem


def get_vehicle_path(vehicle_id: str) -> Path:
    """Get full path for a vehicle ID."""
    return Path(app.config["VEHICLES_DIR"]) / f"{vehicle_id}.yaml"


def get_vehicle_or_404(vehicle_id: str) -> Vehicle:
    path = get_vehicle_path(vehicle_id)
    if not path.exists():
        abort(404, description=f"Vehicle '{vehicle_id}' not found")
    return load_vehicle(path)


def to_json(value: Any) -> Any:
    """Convert dataclasses, enums and dates into JSON-ready values."""
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    return value


def reminder_json(reminder) -> dict:
    data = to_json(reminder)
    data["label"] = reminder.label
    return data


def trip_json(trip: Trip) -> dict:
    return {
        "id": trip.id,
        "destination": trip.destination,
        "start": trip.start,
        "end": trip.end,
        "estimatedDistance": trip.estimated_distance,
        "status": trip.status.value,
        "distanceTraveled": trip.distance_traveled,
        "totalExpenses": trip.total_expenses,
        "expenses": [{"id": e.id, "item": e.item, "cost": e.cost} for e in trip.expenses],
    }


@app.errorhandler(404)
def not_found(error):
    return jsonify(error=error.description), 404


@app.errorhandler(400)
def bad_request(error):
    return jsonify(error=error.description), 400


@app.route("/")
def index():
    """All vehicles with a short maintenance summary."""
    vehicles = []
    for path in get_vehicle_files():
        vehicle = load_vehicle(path)
        reminders = vehicle.active_reminders()
        vehicles.append({
            "id": get_vehicle_id(path),
            "name": vehicle.bike.display_name,
            "odometer": vehicle.current_odometer,
            "due": sum(1 for r in reminders if r.is_due),
            "reminders": len(reminders),
        })
    return jsonify(vehicles=vehicles)


@app.route("/vehicle/<vehicle_id>/stats")
def vehicle_stats(vehicle_id: str):
    vehicle = get_vehicle_or_404(vehicle_id)
    return jsonify(to_json(vehicle.stats()))


@app.route("/vehicle/<vehicle_id>/reminders")
def vehicle_reminders(vehicle_id: str):
    vehicle = get_vehicle_or_404(vehicle_id)
    return jsonify(reminders=[reminder_json(r) for r in vehicle.active_reminders()])


@app.route("/vehicle/<vehicle_id>/next-service")
def vehicle_next_service(vehicle_id: str):
    vehicle = get_vehicle_or_404(vehicle_id)
    return jsonify(to_json(vehicle.next_service()))


@app.route("/vehicle/<vehicle_id>/trips")
def vehicle_trips(vehicle_id: str):
    vehicle = get_vehicle_or_404(vehicle_id)
    active = vehicle.active_trip
    return jsonify(
        trips=[trip_json(t) for t in vehicle.trips],
        activeTripId=active.id if active else None,
    )


@app.route("/vehicle/<vehicle_id>/trip-advisory", methods=["POST"])
def trip_advisory(vehicle_id: str):
    """
    Maintenance advisory for a saved trip (``tripId``) or an ad-hoc plan
    (``destination``, ``distance`` and optional ``start``).
    """
    vehicle = get_vehicle_or_404(vehicle_id)
    body = request.get_json(silent=True) or {}

    if body.get("tripId"):
        trip = vehicle.get_trip(str(body["tripId"]))
        if trip is None:
            abort(404, description=f"Trip '{body['tripId']}' not found")
    else:
        try:
            distance = float(body["distance"])
            destination = str(body["destination"])
        except (KeyError, TypeError, ValueError):
            abort(400, description="destination and a numeric distance are required")
        start = str(body.get("start") or date.today().isoformat())
        try:
            parse_date(start)
        except ValueError:
            abort(400, description=f"Invalid start date: {start!r}")
        trip = Trip("draft", destination, start, distance)

    advisory_request = vehicle.advisory_request(trip)
    advisor = app.config["TRIP_ADVISOR"] or get_trip_advisor(settings)
    try:
        advisories = advisor.advise(advisory_request)
    except AdvisoryError as e:
        logger.warning(f"Trip advisory for {vehicle_id} failed: {e}")
        return jsonify(error=str(e), retryable=True), 502

    return jsonify(
        request=advisory_request.to_payload(),
        projectedEndOdometer=advisory_request.projected_end_odometer,
        advisory=[a.to_payload() for a in advisories],
    )


@app.route("/vehicle/<vehicle_id>/odometer", methods=["POST"])
def update_odometer(vehicle_id: str):
    """Update the current odometer reading."""
    get_vehicle_or_404(vehicle_id)
    body = request.get_json(silent=True) or {}
    try:
        odometer = float(body["odometer"])
    except (KeyError, TypeError, ValueError):
        abort(400, description="Invalid odometer value")

    save_current_odometer(get_vehicle_path(vehicle_id), odometer)
    return jsonify(odometer=odometer)


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
