"""Derived statistics dataclasses."""

from dataclasses import dataclass
from typing import Optional

from .status import Condition


@dataclass
class MileageStats:
    """Fuel efficiency in km per liter. Zero when it cannot be determined."""

    average: float = 0
    most_recent: float = 0
    best: float = 0


@dataclass
class CpkData:
    """
    Cost-per-kilometer breakdown and condition rating.

    When there is not enough history, only ``condition`` is set
    (to ``Condition.NOT_ENOUGH_DATA``) and ``total_cpk`` is None.
    """

    condition: Condition
    total_cpk: Optional[float] = None
    fuel_cpk: Optional[float] = None
    service_cpk: Optional[float] = None
    fuel_cpk_percent: Optional[int] = None
    service_cpk_percent: Optional[int] = None
    total_distance: Optional[float] = None

    @classmethod
    def not_enough_data(cls) -> "CpkData":
        return cls(condition=Condition.NOT_ENOUGH_DATA)

    @property
    def has_data(self) -> bool:
        return self.total_cpk is not None


@dataclass
class Stats:
    """Snapshot of the whole fuel and service history."""

    last_odometer: float
    total_fuel_cost: float
    total_service_cost: float
    total_ownership: float
    avg_mileage: float
    last_mileage: float
    best_mileage: float
    cost_per_km: float
    efficiency_status: str
    daily_avg: float
    total_parts_changed: int
    total_oil_changes: int
    cpk: CpkData
    total_services: int
    total_fuel_liters: float
    total_fuel_logs: int
    last_service_date: Optional[str] = None
