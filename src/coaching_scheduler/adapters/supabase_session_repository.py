"""Supabase-backed session repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from coaching_scheduler.domain.errors import DuplicateSlotError
from coaching_scheduler.domain.models import StaffSummary
from coaching_scheduler.domain.sessions import SessionRecord, SessionStatus, SlotWindow
from coaching_scheduler.services.bookings import SessionRepository

_TABLE = "sessions"
_COLUMNS = (
    "id, customer_id, staff_id, start_at, end_at, title, meet_url, external_id, "
    "status, created_at, updated_at, staff:staff_members(id, code, name, email)"
)
_UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for booked sessions."""

    client: Client

    def create_session(  # noqa: PLR0913
        self,
        customer_id: UUID,
        staff_id: UUID,
        window: SlotWindow,
        title: str,
        meet_url: str,
        external_id: str | None,
    ) -> SessionRecord:
        """Insert a scheduled session row and return it."""
        query = self.client.table(_TABLE).insert(
            {
                "customer_id": str(customer_id),
                "staff_id": str(staff_id),
                "start_at": _iso(window.start_at),
                "end_at": _iso(window.end_at),
                "title": title,
                "meet_url": meet_url,
                "external_id": external_id,
                "status": SessionStatus.SCHEDULED.value,
            }
        )
        response = _execute_write(query)
        if not response.data:
            raise RuntimeError("Failed to create session")
        return _to_record(response.data[0])

    def update_booking(  # noqa: PLR0913
        self,
        session_id: UUID,
        staff_id: UUID,
        window: SlotWindow,
        title: str,
        meet_url: str,
        external_id: str | None,
    ) -> SessionRecord:
        """Rewrite the slot and meeting of a session row."""
        query = (
            self.client.table(_TABLE)
            .update(
                {
                    "staff_id": str(staff_id),
                    "start_at": _iso(window.start_at),
                    "end_at": _iso(window.end_at),
                    "title": title,
                    "meet_url": meet_url,
                    "external_id": external_id,
                    "status": SessionStatus.SCHEDULED.value,
                    "updated_at": _iso(datetime.now(tz=UTC)),
                }
            )
            .eq("id", str(session_id))
        )
        response = _execute_write(query)
        if not response.data:
            raise RuntimeError("Failed to update session")
        return _to_record(response.data[0])

    def update_status(self, session_id: UUID, status: SessionStatus) -> SessionRecord:
        """Change a session's status and return the refreshed row."""
        self.client.table(_TABLE).update(
            {"status": status.value, "updated_at": _iso(datetime.now(tz=UTC))}
        ).eq("id", str(session_id)).execute()
        session = self.get_session(session_id)
        if session is None:
            raise RuntimeError("Session disappeared during status update")
        return session

    def get_session(self, session_id: UUID) -> SessionRecord | None:
        """Return a session by id, if present."""
        response = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .eq("id", str(session_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_record(response.data[0])

    def find_active_at(
        self,
        staff_id: UUID,
        start_at: datetime,
        exclude_session_id: UUID | None = None,
    ) -> SessionRecord | None:
        """Return a non-cancelled session for the staff at that exact start."""
        query = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .eq("staff_id", str(staff_id))
            .eq("start_at", _iso(start_at))
            .neq("status", SessionStatus.CANCELLED.value)
        )
        if exclude_session_id is not None:
            query = query.neq("id", str(exclude_session_id))
        response = query.limit(1).execute()
        if not response.data:
            return None
        return _to_record(response.data[0])

    def list_active_between(
        self, start: datetime, end: datetime
    ) -> list[SessionRecord]:
        """Return non-cancelled sessions starting in [start, end)."""
        response = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .gte("start_at", _iso(start))
            .lt("start_at", _iso(end))
            .neq("status", SessionStatus.CANCELLED.value)
            .execute()
        )
        return [_to_record(row) for row in response.data or []]

    def list_for_customer(self, customer_id: UUID) -> list[SessionRecord]:
        """Return a customer's sessions, latest start first."""
        response = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .eq("customer_id", str(customer_id))
            .order("start_at", desc=True)
            .execute()
        )
        return [_to_record(row) for row in response.data or []]


def _execute_write(query):  # type: ignore[no-untyped-def]
    try:
        return query.execute()
    except APIError as exc:
        if exc.code == _UNIQUE_VIOLATION:
            raise DuplicateSlotError(str(exc)) from exc
        raise


def _iso(moment: datetime) -> str:
    return moment.astimezone(UTC).isoformat()


def _to_record(row: dict[str, object]) -> SessionRecord:
    staff_row = row.get("staff")
    staff = (
        StaffSummary(
            id=UUID(str(staff_row["id"])),
            code=str(staff_row["code"]),
            name=str(staff_row["name"]),
            email=str(staff_row["email"]),
        )
        if isinstance(staff_row, dict)
        else None
    )
    return SessionRecord(
        id=UUID(str(row["id"])),
        customer_id=UUID(str(row["customer_id"])),
        staff_id=UUID(str(row["staff_id"])),
        start_at=datetime.fromisoformat(str(row["start_at"])),
        end_at=datetime.fromisoformat(str(row["end_at"])),
        title=str(row["title"]),
        meet_url=str(row["meet_url"]),
        external_id=row.get("external_id"),
        status=SessionStatus(str(row["status"])),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        updated_at=datetime.fromisoformat(str(row["updated_at"])),
        staff=staff,
    )
