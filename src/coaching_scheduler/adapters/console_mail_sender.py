"""Notification sender that writes emails to the application log."""

import logging
from dataclasses import dataclass

from coaching_scheduler.domain.notifications import (
    NotificationResult,
    SessionNotification,
)
from coaching_scheduler.services.notifications import NotificationSender

_logger = logging.getLogger(__name__)


@dataclass
class ConsoleMailSender(NotificationSender):
    """Logs session emails instead of delivering them."""

    from_address: str = "no-reply@example.com"

    async def send_session_notification(
        self, notification: SessionNotification
    ) -> NotificationResult:
        """Log the notification and report success."""
        _logger.info(
            "Sending session email from %s to %s for %s (%s - %s) with %s",
            self.from_address,
            notification.to,
            notification.customer_name,
            notification.start_at.isoformat(),
            notification.end_at.isoformat(),
            notification.staff_name,
        )
        _logger.debug("Meeting URL: %s", notification.meet_url)
        return NotificationResult(success=True)
