"""Booking orchestrator for one-hour coaching sessions."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from coaching_scheduler.domain.errors import (
    BookingError,
    ConflictError,
    DuplicateSlotError,
    InvalidInputError,
    NotFoundError,
    ProvisioningFailedError,
)
from coaching_scheduler.domain.meetings import MeetingRequest, ProvisionedMeeting
from coaching_scheduler.domain.models import CustomerProfile, StaffSummary
from coaching_scheduler.domain.notifications import EmailStatus
from coaching_scheduler.domain.sessions import (
    BookingResult,
    SessionRecord,
    SessionStatus,
    SlotWindow,
)
from coaching_scheduler.services.meetings import MeetingProvisioner
from coaching_scheduler.services.notifications import NotificationLogger
from coaching_scheduler.services.slots import SlotPolicy
from coaching_scheduler.services.staff import StaffService

_logger = logging.getLogger(__name__)

SLOT_TAKEN_MESSAGE = "This slot is already booked. Please choose another time."


class SessionRepository(Protocol):
    """Persistence interface for booked sessions."""

    def create_session(  # noqa: PLR0913
        self,
        customer_id: UUID,
        staff_id: UUID,
        window: SlotWindow,
        title: str,
        meet_url: str,
        external_id: str | None,
    ) -> SessionRecord:
        """Create a scheduled session, raising DuplicateSlotError on a taken slot."""

    def update_booking(  # noqa: PLR0913
        self,
        session_id: UUID,
        staff_id: UUID,
        window: SlotWindow,
        title: str,
        meet_url: str,
        external_id: str | None,
    ) -> SessionRecord:
        """Rewrite a session's slot and meeting, marking it scheduled."""

    def update_status(self, session_id: UUID, status: SessionStatus) -> SessionRecord:
        """Change a session's status and return it."""

    def get_session(self, session_id: UUID) -> SessionRecord | None:
        """Return a session by id, if present."""

    def find_active_at(
        self,
        staff_id: UUID,
        start_at: datetime,
        exclude_session_id: UUID | None = None,
    ) -> SessionRecord | None:
        """Return a non-cancelled session for the staff at that exact start."""

    def list_active_between(
        self, start: datetime, end: datetime
    ) -> list[SessionRecord]:
        """Return non-cancelled sessions starting in [start, end)."""

    def list_for_customer(self, customer_id: UUID) -> list[SessionRecord]:
        """Return a customer's sessions, latest start first."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class BookingService:
    """Owns session lifecycle transitions.

    Booking runs as a short saga: provision the meeting, persist the session,
    then notify. Failures before persistence abort the request with nothing
    written; a notification failure after persistence is recorded in the email
    log and the booking still succeeds, as does a failure to write that log.
    Provisioned meetings are never rolled back.
    """

    staff_service: StaffService
    session_repository: SessionRepository
    meeting_provisioner: MeetingProvisioner
    notification_logger: NotificationLogger
    policy: SlotPolicy = field(default_factory=SlotPolicy)
    clock: Callable[[], datetime] = _utcnow

    def list_for_customer(self, customer: CustomerProfile) -> list[SessionRecord]:
        """Return the caller's sessions."""
        return self.session_repository.list_for_customer(customer.id)

    def get_session_detail(
        self, customer: CustomerProfile, session_id: UUID
    ) -> SessionRecord:
        """Return one of the caller's sessions."""
        return self._ensure_owned(customer, session_id)

    async def create_session(
        self,
        customer: CustomerProfile,
        staff_id: UUID,
        start_at: str | datetime,
        title: str | None = None,
    ) -> BookingResult:
        """Book a slot with a staff member for the caller."""
        staff = self._ensure_staff(staff_id)
        window = self.policy.compute_slot_window(start_at, now=self.clock())
        self._ensure_slot_is_available(staff.id, window.start_at)
        return await self._book(customer, staff, window, title)

    async def reschedule_session(
        self,
        customer: CustomerProfile,
        session_id: UUID,
        staff_id: UUID | None = None,
        start_at: str | datetime | None = None,
        title: str | None = None,
    ) -> BookingResult:
        """Move one of the caller's sessions to a new slot, staff or title."""
        existing = self._ensure_owned(customer, session_id)
        if existing.status == SessionStatus.CANCELLED:
            raise InvalidInputError("A cancelled booking cannot be modified.")

        staff = self._ensure_staff(staff_id or existing.staff_id)
        window = self.policy.compute_slot_window(
            start_at if start_at is not None else existing.start_at,
            now=self.clock(),
        )
        if staff.id != existing.staff_id or window.start_at != existing.start_at:
            self._ensure_slot_is_available(
                staff.id, window.start_at, exclude_session_id=existing.id
            )

        result = await self._book(
            customer, staff, window, title or existing.title, existing=existing
        )
        if existing.external_id:
            _logger.info(
                "Replaced meeting %s with %s for rescheduled session",
                existing.external_id,
                result.session.external_id or "(none)",
                extra={"session_id": str(existing.id)},
            )
        return result

    def cancel_session(
        self, customer: CustomerProfile, session_id: UUID
    ) -> SessionRecord:
        """Cancel one of the caller's sessions; cancelling twice is a no-op."""
        session = self._ensure_owned(customer, session_id)
        if session.status == SessionStatus.CANCELLED:
            return session
        return self.session_repository.update_status(
            session.id, SessionStatus.CANCELLED
        )

    async def _book(
        self,
        customer: CustomerProfile,
        staff: StaffSummary,
        window: SlotWindow,
        title: str | None,
        existing: SessionRecord | None = None,
    ) -> BookingResult:
        session_title = title or f"Online session with {staff.name}"
        meeting = await self._provision_meeting(customer, staff, window, session_title)
        session = self._store_session(
            customer, staff, window, session_title, meeting, existing
        )
        try:
            email_log = await self.notification_logger.notify(session, customer, staff)
        except Exception:
            _logger.exception(
                "Failed to record notification for booked session",
                extra={"session_id": str(session.id)},
            )
            return BookingResult(session=session, email_status=EmailStatus.FAILED)
        return BookingResult(session=session, email_status=email_log.status)

    async def _provision_meeting(
        self,
        customer: CustomerProfile,
        staff: StaffSummary,
        window: SlotWindow,
        title: str,
    ) -> ProvisionedMeeting:
        request = MeetingRequest(
            start_at=window.start_at,
            end_at=window.end_at,
            title=title,
            attendees=[customer.email],
        )
        try:
            return await self.meeting_provisioner.create_meeting(staff, request)
        except BookingError:
            _logger.exception("Meeting provider rejected the request")
            raise
        except Exception as exc:
            _logger.exception(
                "Failed to create meeting", extra={"staff_id": str(staff.id)}
            )
            raise ProvisioningFailedError(
                "Failed to create the meeting link. Please try again later."
            ) from exc

    def _store_session(  # noqa: PLR0913
        self,
        customer: CustomerProfile,
        staff: StaffSummary,
        window: SlotWindow,
        title: str,
        meeting: ProvisionedMeeting,
        existing: SessionRecord | None,
    ) -> SessionRecord:
        try:
            if existing is not None:
                session = self.session_repository.update_booking(
                    session_id=existing.id,
                    staff_id=staff.id,
                    window=window,
                    title=title,
                    meet_url=meeting.meet_url,
                    external_id=meeting.external_id,
                )
            else:
                session = self.session_repository.create_session(
                    customer_id=customer.id,
                    staff_id=staff.id,
                    window=window,
                    title=title,
                    meet_url=meeting.meet_url,
                    external_id=meeting.external_id,
                )
        except DuplicateSlotError as exc:
            _logger.warning(
                "Slot taken by a concurrent booking",
                extra={"staff_id": str(staff.id)},
            )
            raise ConflictError(SLOT_TAKEN_MESSAGE) from exc
        return replace(session, staff=staff)

    def _ensure_staff(self, staff_id: UUID) -> StaffSummary:
        staff = self.staff_service.find_by_id(staff_id)
        if staff is None:
            raise InvalidInputError("The selected staff member does not exist.")
        return staff

    def _ensure_slot_is_available(
        self,
        staff_id: UUID,
        start_at: datetime,
        exclude_session_id: UUID | None = None,
    ) -> None:
        overlap = self.session_repository.find_active_at(
            staff_id, start_at, exclude_session_id=exclude_session_id
        )
        if overlap is not None:
            raise ConflictError(SLOT_TAKEN_MESSAGE)

    def _ensure_owned(
        self, customer: CustomerProfile, session_id: UUID
    ) -> SessionRecord:
        session = self.session_repository.get_session(session_id)
        if session is None or session.customer_id != customer.id:
            raise NotFoundError("Booking not found.")
        return session
