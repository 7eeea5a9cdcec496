"""Derived reminder and next-service dataclasses."""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from .status import ReminderType


@dataclass
class Reminder:
    """Progress of one maintenance interval. Recomputed on every evaluation."""

    name: str
    reminder_type: ReminderType
    used: float
    total: float
    progress: float
    is_due: bool
    remaining_days: Optional[int] = None  # None: no usage rate to project with
    estimated_due_date: Optional[date] = None
    last_odometer: Optional[float] = None
    last_date: Optional[str] = None

    @property
    def unit(self) -> str:
        return "KM" if self.reminder_type == ReminderType.KM else "Days"

    @property
    def label(self) -> str:
        """Human-readable "used / total" string."""
        return f"{self.used:,.0f} / {self.total:,.0f} {self.unit}"


@dataclass
class NextServiceInfo:
    """The next service visit and the tasks that bundle into it."""

    last_service_date: Optional[str] = None
    next_service_date: Optional[date] = None
    days_to_next_service: Optional[int] = None
    tasks: List[str] = field(default_factory=list)
    progress: float = 0

    @property
    def nothing_due(self) -> bool:
        return not self.tasks
