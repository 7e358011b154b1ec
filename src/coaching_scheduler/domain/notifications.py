"""Domain models for notification delivery and its audit trail."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class EmailStatus(StrEnum):
    """Outcome of a notification attempt."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class SessionNotification:
    """Payload handed to a notification sender."""

    to: str
    customer_name: str
    staff_name: str
    start_at: datetime
    end_at: datetime
    meet_url: str
    title: str


@dataclass(frozen=True)
class NotificationResult:
    """Result reported by a notification sender."""

    success: bool
    error_message: str | None = None


@dataclass(frozen=True)
class EmailLogRecord:
    """Append-only audit row for one notification attempt."""

    id: UUID
    session_id: UUID
    to_email: str
    subject: str
    body: str
    status: EmailStatus
    error_message: str | None
    created_at: datetime
