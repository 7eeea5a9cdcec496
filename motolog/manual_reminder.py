"""ManualReminder class for free-form "remind me" entries."""

from typing import Optional


class ManualReminder:
    """A user reminder due at a date, an odometer reading, or both."""

    def __init__(
            self,
            id: str,
            due_date: Optional[str] = None,
            due_odometer: Optional[float] = None,
            notes: Optional[str] = None,
            is_completed: bool = False,
    ):
        self.id = id
        self.due_date = due_date
        self.due_odometer = due_odometer
        self.notes = notes
        self.is_completed = is_completed or False

    @property
    def name(self) -> str:
        return self.notes or "General Service"
