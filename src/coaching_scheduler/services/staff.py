"""Staff roster lookups."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from coaching_scheduler.domain.models import StaffRecord, StaffSummary


class StaffRepository(Protocol):
    """Persistence interface for staff members."""

    def get_staff(self, staff_id: UUID) -> StaffRecord | None:
        """Return a staff member by id, if present."""

    def list_staff(self) -> list[StaffRecord]:
        """Return every staff member."""


@dataclass
class StaffService:
    """Read-only access to the staff roster."""

    repository: StaffRepository

    def find_by_id(self, staff_id: UUID) -> StaffSummary | None:
        """Return the sanitized staff member for an id, if present."""
        record = self.repository.get_staff(staff_id)
        if record is None:
            return None
        return self.sanitize(record)

    def list_all(self) -> list[StaffSummary]:
        """Return the sanitized roster."""
        return [self.sanitize(record) for record in self.repository.list_staff()]

    @staticmethod
    def sanitize(record: StaffRecord) -> StaffSummary:
        """Strip credentials from a staff record."""
        return StaffSummary(
            id=record.id,
            code=record.code,
            name=record.name,
            email=record.email,
        )
