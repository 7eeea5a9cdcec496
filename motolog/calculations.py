"""
Pure calculation functions: mileage, cost per km, reminders and next service.

Nothing here does I/O or keeps state. ``today`` defaults to the current
date but every function that depends on it accepts it explicitly.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Union

from dateutil.parser import isoparse

from .fuel_log import FuelLog
from .manual_reminder import ManualReminder
from .reminder import NextServiceInfo, Reminder
from .service_record import ServiceRecord
from .stats import CpkData, MileageStats, Stats
from .status import Condition, EngineCc, ReminderType, TankStatus

# Minimum odometer span before a cost-per-km rating is trusted
CPK_MIN_DISTANCE = 500

# Per displacement class: upper bounds of mint (exclusive), solid, fair and worn (inclusive)
CPK_RANGES: Dict[EngineCc, Dict[str, float]] = {
    EngineCc.CC_50_125: {"mint": 3.60, "solid": 5.77, "fair": 8.65, "worn": 14.41},
    EngineCc.CC_126_250: {"mint": 4.32, "solid": 6.49, "fair": 10.09, "worn": 17.30},
    EngineCc.CC_251_500: {"mint": 5.77, "solid": 7.93, "fair": 12.25, "worn": 20.18},
    EngineCc.CC_501_1000: {"mint": 7.21, "solid": 10.09, "fair": 14.41, "worn": 23.06},
    EngineCc.CC_OVER_1000: {"mint": 8.65, "solid": 12.25, "fair": 17.30, "worn": 28.83},
}

# Trip duration fallback when there is no usage history
DEFAULT_DAILY_KM = 50

DateLike = Union[date, datetime, str]


def parse_date(value: DateLike) -> date:
    """Coerce an ISO string, datetime or date to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return isoparse(value).date()


def real_fuel_logs(logs: Iterable[FuelLog]) -> List[FuelLog]:
    """Drop odometer markers, keeping actual fuel purchases."""
    return [log for log in logs if log.is_real]


# =============================================================================
# Mileage
# =============================================================================


def calculate_mileage_stats(logs: Sequence[FuelLog]) -> MileageStats:
    """
    Average, most recent and best km/l from real fuel logs.

    Samples come from consecutive full-tank pairs: distance between the
    two fills divided by the liters bought after the first one, up to and
    including the second. With no usable pair, the riders' own estimates
    on each log are used instead.
    """
    logs = real_fuel_logs(logs)
    if len(logs) < 2:
        return MileageStats()

    ordered = sorted(logs, key=lambda log: log.odometer)
    full_indices = [
        i for i, log in enumerate(ordered) if log.tank_status == TankStatus.FULL
    ]

    samples: List[float] = []
    for first, second in zip(full_indices, full_indices[1:]):
        distance = ordered[second].odometer - ordered[first].odometer
        fuel = sum(log.liters for log in ordered[first + 1 : second + 1])
        if distance > 0 and fuel > 0:
            samples.append(distance / fuel)

    if not samples:
        samples = [
            log.estimated_mileage
            for log in ordered
            if log.estimated_mileage and log.estimated_mileage > 0
        ]

    if not samples:
        return MileageStats()

    return MileageStats(
        average=sum(samples) / len(samples),
        most_recent=samples[-1],
        best=max(samples),
    )


def efficiency_status(avg_mileage: float) -> str:
    if avg_mileage > 40:
        return "Excellent"
    if avg_mileage > 25:
        return "Average"
    return "Poor"


# =============================================================================
# Cost per kilometer
# =============================================================================


def classify_cpk(total_cpk: float, engine_cc: EngineCc) -> Condition:
    """Map a cost per km onto the condition scale for the displacement class."""
    ranges = CPK_RANGES[EngineCc(engine_cc)]
    if total_cpk < ranges["mint"]:
        return Condition.MINT
    if total_cpk <= ranges["solid"]:
        return Condition.SOLID
    if total_cpk <= ranges["fair"]:
        return Condition.FAIR
    if total_cpk <= ranges["worn"]:
        return Condition.WORN
    return Condition.BASKET


def calculate_cpk(
    logs: Sequence[FuelLog], services: Sequence[ServiceRecord], engine_cc: EngineCc
) -> CpkData:
    """
    Cost per km over the pooled odometer span of fuel and service records.

    Returns ``CpkData.not_enough_data()`` for fewer than two odometer
    readings, a span under 500 km, or no spend at all.
    """
    logs = real_fuel_logs(logs)
    odometers = sorted(
        r.odometer for r in list(logs) + list(services) if r.odometer and r.odometer > 0
    )
    if len(odometers) < 2:
        return CpkData.not_enough_data()

    total_distance = odometers[-1] - odometers[0]
    if total_distance < CPK_MIN_DISTANCE:
        return CpkData.not_enough_data()

    fuel_sum = sum(log.amount for log in logs)
    service_sum = sum(s.total_cost for s in services)
    total_expense = fuel_sum + service_sum
    if total_distance <= 0 or total_expense <= 0:
        return CpkData.not_enough_data()

    total_cpk = total_expense / total_distance
    return CpkData(
        condition=classify_cpk(total_cpk, engine_cc),
        total_cpk=round(total_cpk, 2),
        fuel_cpk=round(fuel_sum / total_distance, 2),
        service_cpk=round(service_sum / total_distance, 2),
        fuel_cpk_percent=round(fuel_sum / total_expense * 100),
        service_cpk_percent=round(service_sum / total_expense * 100),
        total_distance=total_distance,
    )


# =============================================================================
# Stats snapshot
# =============================================================================


def calculate_daily_avg(
    logs: Sequence[FuelLog], services: Sequence[ServiceRecord]
) -> float:
    """Average km per day between the earliest and latest dated odometer readings."""
    readings = sorted(
        (parse_date(r.date), r.odometer)
        for r in list(logs) + list(services)
        if r.date and r.odometer
    )
    if len(readings) < 2:
        return 0
    (first_date, first_odo), (last_date, last_odo) = readings[0], readings[-1]
    days = (last_date - first_date).days
    distance = last_odo - first_odo
    if days > 0 and distance > 0:
        return distance / days
    return 0


def calculate_stats(
    logs: Sequence[FuelLog], services: Sequence[ServiceRecord], engine_cc: EngineCc
) -> Stats:
    """
    Build the dashboard snapshot from the full fuel and service history.

    Odometer markers count towards the latest odometer and the daily
    average, but never towards costs, liters or mileage.
    """
    fuel = real_fuel_logs(logs)

    odometers = [r.odometer for r in list(logs) + list(services) if r.odometer]
    last_odometer = max(odometers) if odometers else 0
    first_odometer = min(odometers) if odometers else 0
    total_distance = last_odometer - first_odometer

    total_fuel_cost = sum(log.amount for log in fuel)
    total_service_cost = sum(s.total_cost for s in services)
    total_ownership = total_fuel_cost + total_service_cost
    cost_per_km = total_ownership / total_distance if total_distance > 0 else 0

    mileage = calculate_mileage_stats(fuel)

    oil_changes = 0
    parts_changed = 0
    for service in services:
        for part in service.parts:
            if "oil" in part.name.lower():
                oil_changes += 1
            else:
                parts_changed += 1

    latest = latest_service(services)

    return Stats(
        last_odometer=last_odometer,
        total_fuel_cost=total_fuel_cost,
        total_service_cost=total_service_cost,
        total_ownership=total_ownership,
        avg_mileage=round(mileage.average, 1),
        last_mileage=round(mileage.most_recent, 1),
        best_mileage=round(mileage.best, 1),
        cost_per_km=round(cost_per_km, 2),
        efficiency_status=efficiency_status(mileage.average),
        daily_avg=round(calculate_daily_avg(logs, services), 1),
        total_parts_changed=parts_changed,
        total_oil_changes=oil_changes,
        cpk=calculate_cpk(fuel, services, engine_cc),
        total_services=len(services),
        total_fuel_liters=sum(log.liters for log in fuel),
        total_fuel_logs=len(fuel),
        last_service_date=latest.date if latest else None,
    )


# =============================================================================
# Reminders
# =============================================================================


@dataclass
class PartBaseline:
    """The latest service of a part that carries a reminder interval."""

    name: str
    reminder_type: ReminderType
    reminder_value: float
    last_odometer: float
    last_date: str


def latest_service(services: Sequence[ServiceRecord]) -> Optional[ServiceRecord]:
    """Most recently dated service record, or None."""
    if not services:
        return None
    return sorted(services, key=lambda s: parse_date(s.date))[-1]


def latest_part_baselines(services: Sequence[ServiceRecord]) -> Dict[str, PartBaseline]:
    """
    Fold service history into one baseline per part name.

    Services are visited oldest first, so a later-dated record always
    replaces an earlier one for the same part. Records on the same date
    keep their input order. Parts without a positive interval are skipped.
    """
    baselines: Dict[str, PartBaseline] = {}
    for service in sorted(services, key=lambda s: parse_date(s.date)):
        for part in service.parts:
            if not part.has_reminder:
                continue
            baselines[part.name] = PartBaseline(
                name=part.name,
                reminder_type=part.reminder_type,
                reminder_value=float(part.reminder_value),
                last_odometer=service.odometer,
                last_date=service.date,
            )
    return baselines


def clamp_progress(progress: float) -> float:
    return min(100.0, max(0.0, progress))


def calc_remaining_days(remaining_km: float, daily_avg_km: float) -> Optional[int]:
    """Days until ``remaining_km`` is used up; None without a usage rate."""
    if daily_avg_km <= 0:
        return None
    return math.ceil(remaining_km / daily_avg_km)


def calc_part_reminder(
    baseline: PartBaseline,
    current_odometer: float,
    daily_avg_km: float,
    today: date,
) -> Reminder:
    """Progress of one part interval against the current odometer or date."""
    interval = baseline.reminder_value

    if baseline.reminder_type == ReminderType.KM:
        used = current_odometer - baseline.last_odometer
        is_due = used >= interval
        remaining_days = 0 if is_due else calc_remaining_days(interval - used, daily_avg_km)
        due_date = today + timedelta(days=remaining_days) if remaining_days is not None else None
    else:
        last_date = parse_date(baseline.last_date)
        used = (today - last_date).days
        is_due = used >= interval
        remaining_days = 0 if is_due else math.ceil(interval - used)
        due_date = last_date + timedelta(days=interval)

    return Reminder(
        name=baseline.name,
        reminder_type=baseline.reminder_type,
        used=used,
        total=interval,
        progress=clamp_progress(used / interval * 100),
        is_due=is_due,
        remaining_days=remaining_days,
        estimated_due_date=due_date,
        last_odometer=baseline.last_odometer,
        last_date=baseline.last_date,
    )


def calc_manual_reminder(
    reminder: ManualReminder,
    services: Sequence[ServiceRecord],
    current_odometer: float,
    daily_avg_km: float,
    today: date,
) -> Optional[Reminder]:
    """
    Project a manual reminder by date and by odometer, keeping the sooner one.

    Progress is measured from the latest service (or from today and the
    current odometer when there is no service history). When both
    projections land on the same day the date-based one is kept.
    """
    last = latest_service(services)
    base_date = parse_date(last.date) if last else today
    base_odometer = last.odometer if last else current_odometer

    by_date = None
    if reminder.due_date:
        due_date = parse_date(reminder.due_date)
        total = (due_date - base_date).days
        used = (today - base_date).days
        by_date = Reminder(
            name=reminder.name,
            reminder_type=ReminderType.DAYS,
            used=used,
            total=total,
            progress=clamp_progress(used / total * 100) if total > 0 else 0,
            is_due=today >= due_date,
            remaining_days=max(0, (due_date - today).days),
            estimated_due_date=due_date,
            last_odometer=base_odometer,
            last_date=base_date.isoformat(),
        )

    by_odometer = None
    if reminder.due_odometer and reminder.due_odometer > 0:
        total = reminder.due_odometer - base_odometer
        used = current_odometer - base_odometer
        remaining_days = calc_remaining_days(
            reminder.due_odometer - current_odometer, daily_avg_km
        )
        if remaining_days is not None:
            remaining_days = max(0, remaining_days)
        by_odometer = Reminder(
            name=reminder.name,
            reminder_type=ReminderType.KM,
            used=used,
            total=total,
            progress=clamp_progress(used / total * 100) if total > 0 else 0,
            is_due=current_odometer >= reminder.due_odometer,
            remaining_days=remaining_days,
            estimated_due_date=(
                today + timedelta(days=remaining_days)
                if remaining_days is not None
                else None
            ),
            last_odometer=base_odometer,
            last_date=base_date.isoformat(),
        )

    if by_date and by_odometer:
        if _days_key(by_date) <= _days_key(by_odometer):
            return by_date
        return by_odometer
    return by_date or by_odometer


def get_active_reminders(
    services: Sequence[ServiceRecord],
    manual_reminders: Sequence[ManualReminder],
    current_odometer: float,
    daily_avg_km: float,
    today: Optional[date] = None,
) -> List[Reminder]:
    """All part-interval reminders followed by open manual reminders."""
    today = today or date.today()

    reminders = [
        calc_part_reminder(baseline, current_odometer, daily_avg_km, today)
        for baseline in latest_part_baselines(services).values()
    ]

    for manual in manual_reminders:
        if manual.is_completed:
            continue
        reminder = calc_manual_reminder(
            manual, services, current_odometer, daily_avg_km, today
        )
        if reminder is not None:
            reminders.append(reminder)

    return reminders


# =============================================================================
# Next service
# =============================================================================


def _days_key(reminder: Reminder) -> float:
    """Sort key treating an unknown remaining time as infinitely far away."""
    if reminder.remaining_days is None:
        return math.inf
    return reminder.remaining_days


def get_next_service(
    reminders: Sequence[Reminder], last_service_date: Optional[str] = None
) -> NextServiceInfo:
    """
    Reduce reminders to the next service visit.

    Every reminder due no later than the most urgent one is bundled into
    the same visit.
    """
    if not reminders:
        return NextServiceInfo(last_service_date=last_service_date)

    ordered = sorted(reminders, key=_days_key)
    next_due = ordered[0]
    tasks = [r.name for r in ordered if _days_key(r) <= _days_key(next_due)]

    return NextServiceInfo(
        last_service_date=last_service_date,
        next_service_date=next_due.estimated_due_date,
        days_to_next_service=next_due.remaining_days,
        tasks=tasks,
        progress=clamp_progress(next_due.progress),
    )


def estimate_trip_duration(distance: float, daily_avg_km: float) -> int:
    """Whole days a trip is expected to take at the usual daily pace (at least 1)."""
    pace = daily_avg_km if daily_avg_km > 0 else DEFAULT_DAILY_KM
    return max(1, math.ceil(distance / pace))
