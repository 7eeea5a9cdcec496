"""
Motorbike expense and maintenance tracking.

This package provides records and calculations for one bike:
- Bike, FuelLog, ServiceRecord, ManualReminder, Trip: stored records
- Vehicle: Main aggregate combining all records
- calculations: mileage, cost per km rating, reminders, next service
- advisor: maintenance advisory for a planned trip (local or remote)
- loader: YAML record store
"""

from .status import (
    AdvisoryStatus,
    Condition,
    EngineCc,
    ReminderType,
    ServiceType,
    TankStatus,
    TripStatus,
)
from .bike import Bike
from .fuel_log import FuelLog
from .service_record import ServicePart, ServiceRecord
from .manual_reminder import ManualReminder
from .trip import Trip, TripExpense
from .reminder import NextServiceInfo, Reminder
from .stats import CpkData, MileageStats, Stats
from .calculations import (
    calculate_cpk,
    calculate_daily_avg,
    calculate_mileage_stats,
    calculate_stats,
    classify_cpk,
    estimate_trip_duration,
    get_active_reminders,
    get_next_service,
    latest_part_baselines,
)
from .advisor import (
    Advisory,
    AdvisoryError,
    AdvisoryRequest,
    LocalTripAdvisor,
    MaintenanceTask,
    RemoteTripAdvisor,
    TripAdvisor,
    build_maintenance_tasks,
)
from .vehicle import Vehicle
from .loader import (
    create_vehicle,
    delete_record,
    load_vehicle,
    save_current_odometer,
    save_fuel_log,
    save_manual_reminder,
    save_service_record,
    save_trip,
)

__all__ = [
    "AdvisoryStatus",
    "Condition",
    "EngineCc",
    "ReminderType",
    "ServiceType",
    "TankStatus",
    "TripStatus",
    "Bike",
    "FuelLog",
    "ServicePart",
    "ServiceRecord",
    "ManualReminder",
    "Trip",
    "TripExpense",
    "NextServiceInfo",
    "Reminder",
    "CpkData",
    "MileageStats",
    "Stats",
    "calculate_cpk",
    "calculate_daily_avg",
    "calculate_mileage_stats",
    "calculate_stats",
    "classify_cpk",
    "estimate_trip_duration",
    "get_active_reminders",
    "get_next_service",
    "latest_part_baselines",
    "Advisory",
    "AdvisoryError",
    "AdvisoryRequest",
    "LocalTripAdvisor",
    "MaintenanceTask",
    "RemoteTripAdvisor",
    "TripAdvisor",
    "build_maintenance_tasks",
    "Vehicle",
    "create_vehicle",
    "delete_record",
    "load_vehicle",
    "save_current_odometer",
    "save_fuel_log",
    "save_manual_reminder",
    "save_service_record",
    "save_trip",
]
