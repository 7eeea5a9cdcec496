"""Trip and TripExpense classes."""

from datetime import datetime
from typing import List, Optional

from dateutil.parser import isoparse

from .status import TripStatus


class TripExpense:
    """A single spend logged against a trip."""

    def __init__(self, id: str, item: str, cost: float):
        self.id = id
        self.item = item
        self.cost = cost


class Trip:
    """A planned, active or completed ride."""

    def __init__(
            self,
            id: str,
            destination: str,
            start: str,
            estimated_distance: float,
            end: Optional[str] = None,
            start_odometer: Optional[float] = None,
            end_odometer: Optional[float] = None,
            status: TripStatus = TripStatus.PLANNED,
            expenses: Optional[List[TripExpense]] = None,
    ):
        self.id = id
        self.destination = destination
        self.start = start
        self.estimated_distance = estimated_distance
        self.end = end
        self.start_odometer = start_odometer
        self.end_odometer = end_odometer
        self.status = TripStatus(status)
        self.expenses = expenses or []

    @property
    def start_datetime(self) -> datetime:
        return isoparse(self.start)

    @property
    def end_datetime(self) -> Optional[datetime]:
        return isoparse(self.end) if self.end else None

    @property
    def total_expenses(self) -> float:
        return sum(e.cost for e in self.expenses)

    @property
    def distance_traveled(self) -> float:
        """Odometer distance covered; 0 until both readings exist."""
        if self.start_odometer is None or self.end_odometer is None:
            return 0
        return self.end_odometer - self.start_odometer

    def duration_days(self, now: Optional[datetime] = None) -> int:
        """
        Whole days between start and end (or ``now`` for an unfinished trip).

        Same-day trips count as one day.
        """
        end = self.end_datetime or now or datetime.now()
        start = self.start_datetime
        if start.tzinfo is None and end.tzinfo is not None:
            end = end.replace(tzinfo=None)
        elif start.tzinfo is not None and end.tzinfo is None:
            start = start.replace(tzinfo=None)
        return max(1, (end.date() - start.date()).days)
