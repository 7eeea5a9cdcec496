"""ServiceRecord and ServicePart classes for workshop visits."""

from typing import List, Optional

from .status import ReminderType, ServiceType


class ServicePart:
    """A part or job line on a service record, with an optional reminder interval."""

    def __init__(
            self,
            name: str,
            unit_cost: float = 0,
            quantity: float = 1,
            reminder_type: ReminderType = ReminderType.NONE,
            reminder_value: Optional[float] = None,
    ):
        self.name = name
        self.unit_cost = unit_cost or 0
        self.quantity = 1 if quantity is None else quantity
        self.reminder_type = ReminderType(reminder_type or ReminderType.NONE)
        self.reminder_value = reminder_value

    @property
    def line_cost(self) -> float:
        return self.unit_cost * self.quantity

    @property
    def has_reminder(self) -> bool:
        """True when the part carries a usable interval."""
        if self.reminder_type == ReminderType.NONE:
            return False
        return self.reminder_value is not None and self.reminder_value > 0


class ServiceRecord:
    """A service visit. The total cost is always derived from labor and parts."""

    def __init__(
            self,
            id: str,
            date: str,
            odometer: float,
            title: str,
            labor_cost: float = 0,
            parts: Optional[List[ServicePart]] = None,
            service_type: Optional[ServiceType] = None,
            notes: Optional[str] = None,
            invoice_url: Optional[str] = None,
    ):
        self.id = id
        self.date = date
        self.odometer = odometer
        self.title = title
        self.labor_cost = labor_cost or 0
        self.parts = parts or []
        self.service_type = ServiceType(service_type) if service_type else None
        self.notes = notes
        self.invoice_url = invoice_url

    @property
    def parts_cost(self) -> float:
        return sum(p.line_cost for p in self.parts)

    @property
    def total_cost(self) -> float:
        """Labor plus every part line (unit cost x quantity)."""
        return self.labor_cost + self.parts_cost
