"""FuelLog class for fuel stops."""

from typing import Optional

from .status import TankStatus


class FuelLog:
    """A fuel stop, or an odometer marker when no fuel was bought."""

    def __init__(
            self,
            id: str,
            date: str,
            odometer: float,
            liters: float = 0,
            amount: float = 0,
            price_per_liter: float = 0,
            tank_status: TankStatus = TankStatus.FULL,
            estimated_mileage: Optional[float] = None,
            station: Optional[str] = None,
            fuel_type: Optional[str] = None,
            payment_mode: Optional[str] = None,
            location: Optional[str] = None,
            notes: Optional[str] = None,
    ):
        self.id = id
        self.date = date
        self.odometer = odometer
        self.liters = liters or 0
        self.amount = amount or 0
        self.price_per_liter = price_per_liter or 0
        self.tank_status = TankStatus(tank_status)
        self.estimated_mileage = estimated_mileage
        self.station = station
        self.fuel_type = fuel_type
        self.payment_mode = payment_mode
        self.location = location
        self.notes = notes

    @classmethod
    def odometer_marker(cls, id: str, date: str, odometer: float,
                        notes: Optional[str] = None) -> "FuelLog":
        """Zero-fuel entry that only records an odometer reading."""
        return cls(id, date, odometer, tank_status=TankStatus.PARTIAL, notes=notes)

    @property
    def is_real(self) -> bool:
        """True for an actual fuel purchase, False for an odometer marker."""
        return self.liters > 0 or self.amount > 0
