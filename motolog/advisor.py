"""
Trip maintenance advisory.

A ``TripAdvisor`` takes an ``AdvisoryRequest`` (the trip plus every
interval-tracked maintenance task) and returns one ``Advisory`` per task.
``LocalTripAdvisor`` applies the classification rules directly;
``RemoteTripAdvisor`` delegates to an HTTP advisory service and checks
that the answer has the expected shape.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence

import requests
from jsonschema import ValidationError, validate

from .calculations import latest_part_baselines, parse_date
from .service_record import ServiceRecord
from .status import AdvisoryStatus, ReminderType

logger = logging.getLogger(__name__)

# Share of an interval that triggers a pre-trip service recommendation
EARLY_WARNING_RATIO = 0.8

ADVISORY_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["advisory"],
    "properties": {
        "advisory": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["taskName", "status", "message"],
                "properties": {
                    "taskName": {"type": "string"},
                    "status": {"enum": [s.value for s in AdvisoryStatus]},
                    "kilometersOverdue": {"type": "number"},
                    "daysOverdue": {"type": "number"},
                    "message": {"type": "string"},
                },
            },
        }
    },
}


class AdvisoryError(Exception):
    """The advisory could not be produced. Never means "nothing is due"."""


@dataclass
class MaintenanceTask:
    """An interval-tracked task and when it was last done."""

    name: str
    interval_type: ReminderType
    interval_value: float
    last_performed_odometer: Optional[float] = None
    last_performed_date: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "intervalType": self.interval_type.value,
            "intervalValue": self.interval_value,
        }
        if self.last_performed_odometer is not None:
            payload["lastPerformedOdometer"] = self.last_performed_odometer
        if self.last_performed_date is not None:
            payload["lastPerformedDate"] = parse_date(self.last_performed_date).isoformat()
        return payload


@dataclass
class AdvisoryRequest:
    """A planned trip and the maintenance tasks to check against it."""

    destination: str
    start_date: date
    distance: float
    duration_days: int
    daily_avg_km: float
    current_odometer: float
    maintenance_tasks: List[MaintenanceTask] = field(default_factory=list)
    # Date the current odometer was read; day tasks are measured from it
    as_of_date: Optional[date] = None

    @property
    def total_expected_distance(self) -> float:
        """Trip distance plus everyday riding over the trip's days."""
        return self.distance + self.daily_avg_km * self.duration_days

    @property
    def projected_end_odometer(self) -> float:
        return self.current_odometer + self.total_expected_distance

    @property
    def projected_end_date(self) -> date:
        return self.start_date + timedelta(days=self.duration_days)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "destination": self.destination,
            "startDate": self.start_date.isoformat(),
            "distance": self.distance,
            "durationDays": self.duration_days,
            "dailyAvgKm": self.daily_avg_km,
            "currentOdometer": self.current_odometer,
            "maintenanceTasks": [t.to_payload() for t in self.maintenance_tasks],
        }


@dataclass
class Advisory:
    """Status of one maintenance task relative to the trip."""

    task_name: str
    status: AdvisoryStatus
    message: str
    kilometers_overdue: Optional[float] = None
    days_overdue: Optional[int] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Advisory":
        return cls(
            task_name=data["taskName"],
            status=AdvisoryStatus(data["status"]),
            message=data["message"],
            kilometers_overdue=data.get("kilometersOverdue"),
            days_overdue=data.get("daysOverdue"),
        )

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "taskName": self.task_name,
            "status": self.status.value,
            "message": self.message,
        }
        if self.kilometers_overdue is not None:
            payload["kilometersOverdue"] = self.kilometers_overdue
        if self.days_overdue is not None:
            payload["daysOverdue"] = self.days_overdue
        return payload


def build_maintenance_tasks(services: Sequence[ServiceRecord]) -> List[MaintenanceTask]:
    """One task per part name, from its latest service."""
    return [
        MaintenanceTask(
            name=b.name,
            interval_type=b.reminder_type,
            interval_value=b.reminder_value,
            last_performed_odometer=b.last_odometer,
            last_performed_date=b.last_date,
        )
        for b in latest_part_baselines(services).values()
    ]


class TripAdvisor(ABC):
    """Produces a per-task advisory for a planned trip."""

    @abstractmethod
    def advise(self, request: AdvisoryRequest) -> List[Advisory]:
        """Classify every task in ``request``. Raises AdvisoryError on failure."""


# =============================================================================
# Local rules
# =============================================================================

MSG_OVERDUE = "It is critical to perform this maintenance before your trip."
MSG_DUE_DURING = (
    "This service will become due during your trip. "
    "Complete it before departure."
)
MSG_EARLY_WARNING = (
    "This service will pass 80% of its service interval during the trip. "
    "Complete it before departure to avoid issues on the road."
)


class LocalTripAdvisor(TripAdvisor):
    """Deterministic classification against odometer and calendar projections."""

    def __init__(self, today: Optional[date] = None):
        self.today = today

    def advise(self, request: AdvisoryRequest) -> List[Advisory]:
        today = request.as_of_date or self.today or date.today()
        advisories = []
        for task in request.maintenance_tasks:
            if task.interval_type == ReminderType.KM:
                advisories.append(self.classify_km(task, request))
            elif task.interval_type == ReminderType.DAYS:
                advisories.append(self.classify_days(task, request, today))
        return advisories

    def classify_km(self, task: MaintenanceTask, request: AdvisoryRequest) -> Advisory:
        interval = task.interval_value
        last_odo = task.last_performed_odometer or 0
        due_odo = last_odo + interval
        current = request.current_odometer
        end_odo = request.projected_end_odometer

        if current >= due_odo:
            overdue = current - due_odo
            return Advisory(
                task.name,
                AdvisoryStatus.DUE_BEFORE,
                f"This service is overdue by {overdue:,.0f} km. {MSG_OVERDUE}",
                kilometers_overdue=overdue,
            )
        if end_odo >= due_odo:
            return Advisory(task.name, AdvisoryStatus.DUE_DURING, MSG_DUE_DURING)
        if end_odo > last_odo + interval * EARLY_WARNING_RATIO:
            return Advisory(task.name, AdvisoryStatus.DUE_DURING, MSG_EARLY_WARNING)

        remaining = due_odo - current
        if end_odo + request.total_expected_distance >= due_odo:
            return Advisory(
                task.name,
                AdvisoryStatus.DUE_AFTER,
                f"This service will come due shortly after you return "
                f"({due_odo - end_odo:,.0f} km after the trip). Plan it once you are back.",
            )
        return Advisory(
            task.name,
            AdvisoryStatus.NOT_DUE,
            f"This service is not due for this trip. Next service is in {remaining:,.0f} km.",
        )

    def classify_days(
        self, task: MaintenanceTask, request: AdvisoryRequest, today: date
    ) -> Advisory:
        if not task.last_performed_date:
            return Advisory(
                task.name,
                AdvisoryStatus.DUE_BEFORE,
                f"No previous service is recorded for this task. {MSG_OVERDUE}",
            )

        interval = task.interval_value
        last_date = parse_date(task.last_performed_date)
        due_date = last_date + timedelta(days=interval)
        end_date = request.projected_end_date

        if today >= due_date:
            overdue = (today - due_date).days
            return Advisory(
                task.name,
                AdvisoryStatus.DUE_BEFORE,
                f"This service is overdue by {overdue} days. {MSG_OVERDUE}",
                days_overdue=overdue,
            )
        if end_date >= due_date:
            return Advisory(task.name, AdvisoryStatus.DUE_DURING, MSG_DUE_DURING)
        if (end_date - last_date).days > interval * EARLY_WARNING_RATIO:
            return Advisory(task.name, AdvisoryStatus.DUE_DURING, MSG_EARLY_WARNING)

        remaining = (due_date - today).days
        if end_date + timedelta(days=request.duration_days) >= due_date:
            return Advisory(
                task.name,
                AdvisoryStatus.DUE_AFTER,
                f"This service will come due shortly after you return "
                f"({(due_date - end_date).days} days after the trip). Plan it once you are back.",
            )
        return Advisory(
            task.name,
            AdvisoryStatus.NOT_DUE,
            f"This service is not due for this trip. Next service is in {remaining} days.",
        )


# =============================================================================
# Remote service
# =============================================================================


class RemoteTripAdvisor(TripAdvisor):
    """Posts the request to an advisory endpoint. One attempt, no retries."""

    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def advise(self, request: AdvisoryRequest) -> List[Advisory]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        logger.debug(
            "Requesting advisory for %s with %d tasks",
            request.destination,
            len(request.maintenance_tasks),
        )
        try:
            response = self.session.post(
                self.url, json=request.to_payload(), headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Advisory request failed: {e}")
            raise AdvisoryError(f"Advisory request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Advisory response is not JSON: {e}")
            raise AdvisoryError("Advisory response is not valid JSON") from e

        try:
            validate(instance=data, schema=ADVISORY_RESPONSE_SCHEMA)
        except ValidationError as e:
            logger.error(f"Advisory response has the wrong shape: {e.message}")
            raise AdvisoryError(f"Malformed advisory response: {e.message}") from e

        return [Advisory.from_payload(item) for item in data["advisory"]]
