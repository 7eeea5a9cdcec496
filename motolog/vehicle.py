"""Vehicle class - the main aggregate for a bike's records and calculations."""

from datetime import date
from typing import List, Optional, Union

from .advisor import AdvisoryRequest, build_maintenance_tasks
from .bike import Bike
from .calculations import (
    calculate_stats,
    estimate_trip_duration,
    get_active_reminders,
    get_next_service,
    latest_service,
    parse_date,
    real_fuel_logs,
)
from .fuel_log import FuelLog
from .manual_reminder import ManualReminder
from .reminder import NextServiceInfo, Reminder
from .service_record import ServiceRecord
from .stats import Stats
from .status import TripStatus
from .trip import Trip


class Vehicle:
    """A bike with its fuel logs, service history, reminders and trips."""

    def __init__(
        self,
        bike: Bike,
        fuel_logs: Optional[List[FuelLog]] = None,
        services: Optional[List[ServiceRecord]] = None,
        reminders: Optional[List[ManualReminder]] = None,
        trips: Optional[List[Trip]] = None,
        state_as_of_date: Optional[str] = None,
        state_current_odometer: Optional[float] = None,
    ):
        self.bike = bike
        self.fuel_logs = fuel_logs or []
        self.services = services or []
        self.reminders = reminders or []
        self.trips = trips or []
        self._state_as_of_date = state_as_of_date
        self._state_current_odometer = state_current_odometer

    @property
    def current_odometer(self) -> float:
        """Current odometer, from explicit state or the highest recorded reading."""
        readings = [
            r.odometer for r in self.fuel_logs + self.services if r.odometer is not None
        ]
        if self._state_current_odometer is not None:
            readings.append(self._state_current_odometer)
        return max(readings) if readings else 0

    @property
    def as_of_date(self) -> date:
        """Date of current state, defaults to today."""
        if self._state_as_of_date:
            return parse_date(self._state_as_of_date)
        return date.today()

    @property
    def last_service(self) -> Optional[ServiceRecord]:
        return latest_service(self.services)

    @property
    def active_trip(self) -> Optional[Trip]:
        for trip in self.trips:
            if trip.status == TripStatus.ACTIVE:
                return trip
        return None

    def get_trip(self, trip_id: str) -> Optional[Trip]:
        for trip in self.trips:
            if trip.id == trip_id:
                return trip
        return None

    def get_history_sorted(
        self, kind: str = "all", reverse: bool = True
    ) -> List[Union[FuelLog, ServiceRecord]]:
        """
        Real fuel logs and/or service records ordered by date, then odometer.

        Args:
            kind: "all", "fuel" or "service"
            reverse: If True, newest first (default)
        """
        entries: List[Union[FuelLog, ServiceRecord]] = []
        if kind in ("all", "fuel"):
            entries.extend(real_fuel_logs(self.fuel_logs))
        if kind in ("all", "service"):
            entries.extend(self.services)
        return sorted(
            entries, key=lambda r: (parse_date(r.date), r.odometer), reverse=reverse
        )

    def stats(self) -> Stats:
        return calculate_stats(self.fuel_logs, self.services, self.bike.engine_cc)

    def active_reminders(self) -> List[Reminder]:
        """Reminders measured against the current odometer and as-of date."""
        return get_active_reminders(
            self.services,
            self.reminders,
            self.current_odometer,
            self.stats().daily_avg,
            today=self.as_of_date,
        )

    def next_service(self) -> NextServiceInfo:
        last = self.last_service
        return get_next_service(self.active_reminders(), last.date if last else None)

    def advisory_request(self, trip: Trip) -> AdvisoryRequest:
        """
        Build the maintenance advisory request for a trip.

        The duration is always estimated from the trip distance and the
        daily average, whether or not the trip carries an end date.
        """
        daily_avg = self.stats().daily_avg
        return AdvisoryRequest(
            destination=trip.destination,
            start_date=trip.start_datetime.date(),
            distance=trip.estimated_distance,
            duration_days=estimate_trip_duration(trip.estimated_distance, daily_avg),
            daily_avg_km=daily_avg,
            current_odometer=self.current_odometer,
            maintenance_tasks=build_maintenance_tasks(self.services),
            as_of_date=self.as_of_date,
        )
