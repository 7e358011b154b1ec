"""Supabase-backed staff repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from coaching_scheduler.domain.models import StaffRecord
from coaching_scheduler.services.staff import StaffRepository


@dataclass
class SupabaseStaffRepository(StaffRepository):
    """Supabase implementation for the staff roster."""

    client: Client

    def get_staff(self, staff_id: UUID) -> StaffRecord | None:
        """Return a staff member by id, if present."""
        response = (
            self.client.table("staff_members")
            .select("id, code, name, email")
            .eq("id", str(staff_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_record(response.data[0])

    def list_staff(self) -> list[StaffRecord]:
        """Return every staff member ordered by code."""
        response = (
            self.client.table("staff_members")
            .select("id, code, name, email")
            .order("code")
            .execute()
        )
        return [_to_record(row) for row in response.data or []]


def _to_record(row: dict[str, object]) -> StaffRecord:
    return StaffRecord(
        id=UUID(str(row["id"])),
        code=str(row["code"]),
        name=str(row["name"]),
        email=str(row["email"]),
    )
