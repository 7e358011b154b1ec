"""Per-staff availability grids for a business day."""

from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

from coaching_scheduler.domain.availability import AvailabilitySlot, StaffAvailability
from coaching_scheduler.services.bookings import SessionRepository
from coaching_scheduler.services.slots import SlotPolicy
from coaching_scheduler.services.staff import StaffService


@dataclass
class AvailabilityService:
    """Computes which slots are free for each staff member."""

    staff_service: StaffService
    session_repository: SessionRepository
    policy: SlotPolicy

    def get_availability(self, date_iso: str | None) -> list[StaffAvailability]:
        """Return slot grids for every staff member on a YYYY-MM-DD date."""
        day_start = self.policy.day_start(date_iso)
        staff_members = self.staff_service.list_all()
        if not staff_members:
            return []

        sessions = self.session_repository.list_active_between(
            day_start, day_start + timedelta(days=1)
        )
        booked: dict[UUID, set[int]] = {}
        for session in sessions:
            booked.setdefault(session.staff_id, set()).add(
                self.policy.slot_key(session.start_at)
            )

        slot_starts = self.policy.day_slots(day_start)
        return [
            StaffAvailability(
                staff=staff,
                slots=[
                    AvailabilitySlot(
                        start_at=start_at,
                        available=self.policy.slot_key(start_at)
                        not in booked.get(staff.id, set()),
                    )
                    for start_at in slot_starts
                ],
            )
            for staff in staff_members
        ]
