"""Meeting provisioning port and offline fallback."""

import logging
import secrets
import string
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from coaching_scheduler.domain.meetings import MeetingRequest, ProvisionedMeeting
from coaching_scheduler.domain.models import StaffSummary

_logger = logging.getLogger(__name__)

_SLUG_ALPHABET = string.ascii_lowercase
_SLUG_SHAPE = (3, 4, 3)


class MeetingProvisioner(Protocol):
    """Interface for creating remote meetings."""

    def is_enabled(self) -> bool:
        """Return whether the provider is configured for use."""

    async def create_meeting(
        self, staff: StaffSummary, request: MeetingRequest
    ) -> ProvisionedMeeting:
        """Create a meeting hosted by the staff member and return its link."""


@dataclass
class StubMeetingProvisioner(MeetingProvisioner):
    """Generates meeting links locally without network access."""

    meet_domain: str = "https://meet.google.com"

    def is_enabled(self) -> bool:
        """The stub needs no configuration."""
        return True

    async def create_meeting(
        self, staff: StaffSummary, request: MeetingRequest
    ) -> ProvisionedMeeting:
        """Return a unique-looking meeting URL and external id."""
        meet_url = f"{self.meet_domain.rstrip('/')}/{_generate_slug()}"
        _logger.info(
            "(Stub) Generated meeting URL %s for %r with attendees %s",
            meet_url,
            request.title,
            ", ".join(request.attendees) or "none",
        )
        return ProvisionedMeeting(
            meet_url=meet_url,
            external_id=f"stub-{uuid4().hex}",
        )


def select_meeting_provisioner(
    primary: MeetingProvisioner, fallback: MeetingProvisioner
) -> MeetingProvisioner:
    """Pick the primary provider when it is configured, else the fallback."""
    if primary.is_enabled():
        return primary
    _logger.info("Meeting provider not configured; using offline fallback")
    return fallback


def _generate_slug() -> str:
    return "-".join(
        "".join(secrets.choice(_SLUG_ALPHABET) for _ in range(length))
        for length in _SLUG_SHAPE
    )
