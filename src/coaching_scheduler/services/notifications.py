"""Booking notifications and their email audit trail."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from coaching_scheduler.domain.models import CustomerProfile, StaffSummary
from coaching_scheduler.domain.notifications import (
    EmailLogRecord,
    EmailStatus,
    NotificationResult,
    SessionNotification,
)
from coaching_scheduler.domain.sessions import SessionRecord

_logger = logging.getLogger(__name__)

_DEFAULT_FAILURE_MESSAGE = "Failed to send email."


class NotificationSender(Protocol):
    """Interface for delivering booking notifications."""

    async def send_session_notification(
        self, notification: SessionNotification
    ) -> NotificationResult:
        """Send a notification and report whether it was delivered."""


class EmailLogRepository(Protocol):
    """Persistence interface for email audit rows."""

    def create_log(  # noqa: PLR0913
        self,
        session_id: UUID,
        to_email: str,
        subject: str,
        body: str,
        status: EmailStatus,
        error_message: str | None,
    ) -> EmailLogRecord:
        """Create an email log row and return it."""

    def list_logs(self, session_id: UUID) -> list[EmailLogRecord]:
        """Return email log rows for a session, oldest first."""


@dataclass
class NotificationLogger:
    """Sends booking notifications and records every attempt."""

    sender: NotificationSender
    repository: EmailLogRepository

    async def notify(
        self,
        session: SessionRecord,
        customer: CustomerProfile,
        staff: StaffSummary,
    ) -> EmailLogRecord:
        """Send a notification for a persisted session and log the outcome.

        Delivery failures never propagate: they are recorded as a ``failed``
        row with an error message. Exactly one row is written per call.
        """
        notification = SessionNotification(
            to=customer.email,
            customer_name=customer.name,
            staff_name=staff.name,
            start_at=session.start_at,
            end_at=session.end_at,
            meet_url=session.meet_url,
            title=session.title,
        )
        result = await self._deliver(notification)
        status = EmailStatus.SUCCESS if result.success else EmailStatus.FAILED
        if not result.success:
            _logger.error(
                "Failed to send session email: %s",
                result.error_message,
                extra={"session_id": str(session.id)},
            )
        return self.repository.create_log(
            session_id=session.id,
            to_email=notification.to,
            subject=notification.title,
            body=render_notification_body(notification),
            status=status,
            error_message=result.error_message if not result.success else None,
        )

    def list_for_session(self, session_id: UUID) -> list[EmailLogRecord]:
        """Return the audit trail for a session."""
        return self.repository.list_logs(session_id)

    async def _deliver(self, notification: SessionNotification) -> NotificationResult:
        try:
            result = await self.sender.send_session_notification(notification)
        except Exception as exc:
            _logger.exception("Notification sender raised")
            return NotificationResult(
                success=False, error_message=str(exc) or _DEFAULT_FAILURE_MESSAGE
            )
        if not result.success:
            return NotificationResult(
                success=False,
                error_message=result.error_message or _DEFAULT_FAILURE_MESSAGE,
            )
        return result


def render_notification_body(notification: SessionNotification) -> str:
    """Render the plain-text body of a booking notification."""
    return "\n".join(
        [
            f"Hello {notification.customer_name},",
            "",
            f"Your session with {notification.staff_name} is confirmed.",
            f"Title: {notification.title}",
            f"Start: {notification.start_at.isoformat()}",
            f"End: {notification.end_at.isoformat()}",
            f"Join: {notification.meet_url}",
        ]
    )
