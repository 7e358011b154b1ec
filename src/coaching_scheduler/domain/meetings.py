"""Domain models for remote meetings."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class MeetingRequest:
    """Parameters for provisioning a meeting."""

    start_at: datetime
    end_at: datetime
    title: str
    attendees: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ProvisionedMeeting:
    """A meeting created by a provider."""

    meet_url: str
    external_id: str | None = None
