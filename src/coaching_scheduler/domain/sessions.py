"""Domain models for booked sessions."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from coaching_scheduler.domain.models import StaffSummary
from coaching_scheduler.domain.notifications import EmailStatus


class SessionStatus(StrEnum):
    """Lifecycle states of a session."""

    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class SlotWindow:
    """A validated bookable interval."""

    start_at: datetime
    end_at: datetime


@dataclass(frozen=True)
class SessionRecord:
    """Represents a persisted session."""

    id: UUID
    customer_id: UUID
    staff_id: UUID
    start_at: datetime
    end_at: datetime
    title: str
    meet_url: str
    external_id: str | None
    status: SessionStatus
    created_at: datetime
    updated_at: datetime
    staff: StaffSummary | None = None


@dataclass(frozen=True)
class BookingResult:
    """Outcome of a create or reschedule request."""

    session: SessionRecord
    email_status: EmailStatus
