"""Domain models for availability grids."""

from dataclasses import dataclass
from datetime import datetime

from coaching_scheduler.domain.models import StaffSummary


@dataclass(frozen=True)
class AvailabilitySlot:
    """A single bookable slot and whether it is free."""

    start_at: datetime
    available: bool


@dataclass(frozen=True)
class StaffAvailability:
    """Slot grid for one staff member on one day."""

    staff: StaffSummary
    slots: list[AvailabilitySlot]
