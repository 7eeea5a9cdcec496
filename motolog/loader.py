"""YAML loading and saving utilities for vehicle records."""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .bike import Bike
from .fuel_log import FuelLog
from .manual_reminder import ManualReminder
from .service_record import ServicePart, ServiceRecord
from .trip import Trip, TripExpense
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

COLLECTIONS = ("fuelLogs", "services", "reminders", "trips")


def _as_str(value: Any) -> Optional[str]:
    """YAML turns unquoted dates into date objects; keep them as ISO strings."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


# =============================================================================
# Parsing
# =============================================================================


def _parse_bike(dct: Dict[str, Any]) -> Bike:
    return Bike(
        dct.get("name", ""),
        dct["make"],
        dct["model"],
        dct["year"],
        dct["engineCc"],
        number=dct.get("number"),
        purchase_price=dct.get("purchasePrice"),
        purchase_date=_as_str(dct.get("purchaseDate")),
        fuel_tank_capacity=dct.get("fuelTankCapacity"),
    )


def _parse_fuel_log(dct: Dict[str, Any]) -> FuelLog:
    return FuelLog(
        str(dct["id"]),
        _as_str(dct["date"]),
        dct["odometer"],
        liters=dct.get("liters", 0),
        amount=dct.get("amount", 0),
        price_per_liter=dct.get("pricePerLiter", 0),
        tank_status=dct.get("tankStatus", "full"),
        estimated_mileage=dct.get("estimatedMileage"),
        station=dct.get("station"),
        fuel_type=dct.get("fuelType"),
        payment_mode=dct.get("paymentMode"),
        location=dct.get("location"),
        notes=dct.get("notes"),
    )


def _parse_part(dct: Dict[str, Any]) -> ServicePart:
    return ServicePart(
        dct["name"],
        unit_cost=dct.get("unitCost", 0),
        quantity=dct.get("quantity", 1),
        reminder_type=dct.get("reminderType", "none"),
        reminder_value=dct.get("reminderValue"),
    )


def _parse_service(dct: Dict[str, Any]) -> ServiceRecord:
    # A stored totalCost is ignored; ServiceRecord derives it from labor and parts
    return ServiceRecord(
        str(dct["id"]),
        _as_str(dct["date"]),
        dct["odometer"],
        dct["title"],
        labor_cost=dct.get("laborCost", 0),
        parts=[_parse_part(p) for p in dct.get("parts") or []],
        service_type=dct.get("serviceType"),
        notes=dct.get("notes"),
        invoice_url=dct.get("invoiceUrl"),
    )


def _parse_reminder(dct: Dict[str, Any]) -> ManualReminder:
    return ManualReminder(
        str(dct["id"]),
        due_date=_as_str(dct.get("dueDate")),
        due_odometer=dct.get("dueOdometer"),
        notes=dct.get("notes"),
        is_completed=dct.get("isCompleted", False),
    )


def _parse_trip(dct: Dict[str, Any]) -> Trip:
    return Trip(
        str(dct["id"]),
        dct["destination"],
        _as_str(dct["start"]),
        dct["estimatedDistance"],
        end=_as_str(dct.get("end")),
        start_odometer=dct.get("startOdometer"),
        end_odometer=dct.get("endOdometer"),
        status=dct.get("status", "planned"),
        expenses=[
            TripExpense(str(e["id"]), e["item"], e["cost"])
            for e in dct.get("expenses") or []
        ],
    )


def parse_vehicle(data: Dict[str, Any]) -> Vehicle:
    """Build a Vehicle from the raw YAML mapping."""
    state = data.get("state") or {}
    return Vehicle(
        _parse_bike(data["bike"]),
        fuel_logs=[_parse_fuel_log(d) for d in data.get("fuelLogs") or []],
        services=[_parse_service(d) for d in data.get("services") or []],
        reminders=[_parse_reminder(d) for d in data.get("reminders") or []],
        trips=[_parse_trip(d) for d in data.get("trips") or []],
        state_as_of_date=_as_str(state.get("asOfDate")),
        state_current_odometer=state.get("currentOdometer"),
    )


def load_vehicle(filename: Union[str, Path]) -> Vehicle:
    """Load a vehicle from a YAML file."""
    with open(filename, "rb") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader)
    vehicle = parse_vehicle(data)
    logger.debug(
        f"Loaded {filename}: {len(vehicle.fuel_logs)} fuel logs, "
        f"{len(vehicle.services)} services, {len(vehicle.trips)} trips"
    )
    return vehicle


# =============================================================================
# Serialization (camelCase keys, None values omitted)
# =============================================================================


def _compact(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


def bike_to_dict(bike: Bike) -> Dict[str, Any]:
    return _compact({
        "name": bike.name,
        "number": bike.number,
        "make": bike.make,
        "model": bike.model,
        "year": bike.year,
        "engineCc": bike.engine_cc.value,
        "purchasePrice": bike.purchase_price,
        "purchaseDate": bike.purchase_date,
        "fuelTankCapacity": bike.fuel_tank_capacity,
    })


def fuel_log_to_dict(log: FuelLog) -> Dict[str, Any]:
    return _compact({
        "id": log.id,
        "date": log.date,
        "odometer": log.odometer,
        "liters": log.liters,
        "amount": log.amount,
        "pricePerLiter": log.price_per_liter,
        "tankStatus": log.tank_status.value,
        "estimatedMileage": log.estimated_mileage,
        "station": log.station,
        "fuelType": log.fuel_type,
        "paymentMode": log.payment_mode,
        "location": log.location,
        "notes": log.notes,
    })


def service_to_dict(service: ServiceRecord) -> Dict[str, Any]:
    parts = [
        _compact({
            "name": p.name,
            "unitCost": p.unit_cost,
            "quantity": p.quantity,
            "reminderType": p.reminder_type.value,
            "reminderValue": p.reminder_value,
        })
        for p in service.parts
    ]
    return _compact({
        "id": service.id,
        "date": service.date,
        "odometer": service.odometer,
        "title": service.title,
        "laborCost": service.labor_cost,
        "totalCost": service.total_cost,
        "parts": parts,
        "serviceType": service.service_type.value if service.service_type else None,
        "notes": service.notes,
        "invoiceUrl": service.invoice_url,
    })


def reminder_to_dict(reminder: ManualReminder) -> Dict[str, Any]:
    return _compact({
        "id": reminder.id,
        "dueDate": reminder.due_date,
        "dueOdometer": reminder.due_odometer,
        "notes": reminder.notes,
        "isCompleted": reminder.is_completed,
    })


def trip_to_dict(trip: Trip) -> Dict[str, Any]:
    return _compact({
        "id": trip.id,
        "destination": trip.destination,
        "start": trip.start,
        "end": trip.end,
        "estimatedDistance": trip.estimated_distance,
        "startOdometer": trip.start_odometer,
        "endOdometer": trip.end_odometer,
        "status": trip.status.value,
        "expenses": [
            {"id": e.id, "item": e.item, "cost": e.cost} for e in trip.expenses
        ],
    })


# =============================================================================
# Writes
# =============================================================================


def _read_raw(filename: Union[str, Path]) -> Dict[str, Any]:
    with open(filename, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader)


def _write_raw(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def _upsert(filename: Union[str, Path], collection: str, record: Dict[str, Any]) -> None:
    """Replace the record with the same id in a collection, or append it."""
    data = _read_raw(filename)
    if data.get(collection) is None:
        data[collection] = []

    records: List[Dict[str, Any]] = data[collection]
    for index, existing in enumerate(records):
        if str(existing.get("id")) == str(record["id"]):
            records[index] = record
            logger.info(f"Updated {collection} record {record['id']} in {filename}")
            break
    else:
        records.append(record)
        logger.info(f"Added {collection} record {record['id']} to {filename}")

    _write_raw(filename, data)


def save_fuel_log(filename: Union[str, Path], log: FuelLog) -> None:
    _upsert(filename, "fuelLogs", fuel_log_to_dict(log))


def save_service_record(filename: Union[str, Path], service: ServiceRecord) -> None:
    """Save a service record. The written totalCost is always the derived one."""
    _upsert(filename, "services", service_to_dict(service))


def save_manual_reminder(filename: Union[str, Path], reminder: ManualReminder) -> None:
    _upsert(filename, "reminders", reminder_to_dict(reminder))


def save_trip(filename: Union[str, Path], trip: Trip) -> None:
    _upsert(filename, "trips", trip_to_dict(trip))


def delete_record(filename: Union[str, Path], collection: str, record_id: str) -> None:
    """
    Remove a record by id from one of the vehicle collections.

    Raises KeyError when the collection is unknown or the id is not found.
    """
    if collection not in COLLECTIONS:
        raise KeyError(f"Unknown collection '{collection}'")

    data = _read_raw(filename)
    records = data.get(collection) or []
    remaining = [r for r in records if str(r.get("id")) != str(record_id)]
    if len(remaining) == len(records):
        raise KeyError(f"No {collection} record with id '{record_id}'")

    data[collection] = remaining
    _write_raw(filename, data)
    logger.info(f"Deleted {collection} record {record_id} from {filename}")


def save_current_odometer(filename: Union[str, Path], odometer: float) -> None:
    """Update state.currentOdometer in a vehicle YAML file."""
    data = _read_raw(filename)
    if data.get("state") is None:
        data["state"] = {}
    data["state"]["currentOdometer"] = odometer
    _write_raw(filename, data)
    logger.info(f"Set current odometer of {filename} to {odometer}")


def create_vehicle(
    filename: Union[str, Path],
    bike: Bike,
    current_odometer: Optional[float] = None,
    as_of_date: Optional[str] = None,
) -> None:
    """Create a new vehicle YAML file with empty record collections."""
    data: Dict[str, Any] = {"bike": bike_to_dict(bike), "state": {}}
    if current_odometer is not None:
        data["state"]["currentOdometer"] = current_odometer
    if as_of_date is not None:
        data["state"]["asOfDate"] = as_of_date
    for collection in COLLECTIONS:
        data[collection] = []
    _write_raw(filename, data)
    logger.info(f"Created vehicle file {filename}")


def delete_vehicle(filename: Union[str, Path]) -> None:
    """Remove a vehicle YAML file from disk."""
    Path(filename).unlink()
