"""Bike class for vehicle identification."""

from typing import Optional

from .status import EngineCc


class Bike:
    """Motorbike identification and purchase information."""

    def __init__(
        self,
        name: str,
        make: str,
        model: str,
        year: int,
        engine_cc: EngineCc,
        number: Optional[str] = None,
        purchase_price: Optional[float] = None,
        purchase_date: Optional[str] = None,
        fuel_tank_capacity: Optional[float] = None,
    ):
        self.name = name
        self.make = make
        self.model = model
        self.year = year
        self.engine_cc = EngineCc(engine_cc)
        self.number = number
        self.purchase_price = purchase_price
        self.purchase_date = purchase_date
        self.fuel_tank_capacity = fuel_tank_capacity

    @property
    def display_name(self) -> str:
        """Human-readable bike name."""
        base = f"{self.year} {self.make} {self.model}"
        return f"{self.name} ({base})" if self.name else base
