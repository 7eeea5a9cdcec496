"""Closed enumerations used across records and derived results."""

from enum import Enum


class TankStatus(Enum):
    """How far the tank was filled at a fuel stop."""

    FULL = "full"
    PARTIAL = "partial"


class ReminderType(Enum):
    """Interval unit attached to a service part."""

    NONE = "none"
    KM = "km"
    DAYS = "days"


class ServiceType(Enum):
    REGULAR = "regular"
    REPAIR = "repair"
    EMERGENCY = "emergency"


class TripStatus(Enum):
    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"


class EngineCc(Enum):
    """Engine displacement class. Selects the CPK threshold table."""

    CC_50_125 = "50-125"
    CC_126_250 = "126-250"
    CC_251_500 = "251-500"
    CC_501_1000 = "501-1000"
    CC_OVER_1000 = ">1000"


class Condition(Enum):
    """Running-cost condition rating. Ordered best to worst."""

    MINT = "Mint Condition"
    SOLID = "Solid Rider"
    FAIR = "Fair Runner"
    WORN = "Worn Beater"
    BASKET = "Basket Case"
    NOT_ENOUGH_DATA = "Not Enough Data"


class AdvisoryStatus(Enum):
    """Where a maintenance task falls relative to a planned trip."""

    DUE_BEFORE = "due_before"
    DUE_DURING = "due_during"
    DUE_AFTER = "due_after"
    NOT_DUE = "not_due"
