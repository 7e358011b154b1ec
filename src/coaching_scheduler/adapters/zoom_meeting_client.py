"""Zoom meeting provisioner using server-to-server OAuth."""

import logging
import math
from dataclasses import dataclass
from datetime import UTC

import httpx

from coaching_scheduler.domain.errors import DependencyUnavailableError
from coaching_scheduler.domain.meetings import MeetingRequest, ProvisionedMeeting
from coaching_scheduler.domain.models import StaffSummary
from coaching_scheduler.services.cache import TokenCache
from coaching_scheduler.services.meetings import MeetingProvisioner

_logger = logging.getLogger(__name__)

_DEFAULT_TOKEN_TTL_SECONDS = 3600
_SCHEDULED_MEETING = 2


@dataclass
class ZoomMeetingProvisioner(MeetingProvisioner):
    """HTTPX-backed Zoom provisioner."""

    account_id: str | None
    client_id: str | None
    client_secret: str | None
    http_client: httpx.AsyncClient
    token_cache: TokenCache
    oauth_base_url: str = "https://zoom.us"
    api_base_url: str = "https://api.zoom.us/v2"
    timezone: str = "Asia/Tokyo"

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        account_id: str | None,
        client_id: str | None,
        client_secret: str | None,
        token_cache: TokenCache,
        oauth_base_url: str = "https://zoom.us",
        api_base_url: str = "https://api.zoom.us/v2",
        timezone: str = "Asia/Tokyo",
    ) -> "ZoomMeetingProvisioner":
        """Create a Zoom provisioner with a managed httpx session."""
        return cls(
            account_id=account_id,
            client_id=client_id,
            client_secret=client_secret,
            http_client=httpx.AsyncClient(),
            token_cache=token_cache,
            oauth_base_url=oauth_base_url,
            api_base_url=api_base_url,
            timezone=timezone,
        )

    @property
    def cache_key(self) -> str:
        """Token cache key identifying this Zoom app."""
        return f"zoom:{self.account_id}:{self.client_id}"

    def is_enabled(self) -> bool:
        """Return whether all Zoom credentials are configured."""
        return bool(self.account_id and self.client_id and self.client_secret)

    async def create_meeting(
        self, staff: StaffSummary, request: MeetingRequest
    ) -> ProvisionedMeeting:
        """Create a scheduled Zoom meeting and return its join URL."""
        self._ensure_configured()
        access_token = await self._get_access_token()
        duration_minutes = max(
            1, math.ceil((request.end_at - request.start_at).total_seconds() / 60)
        )
        payload = {
            "topic": request.title or f"Coaching with {staff.name}",
            "type": _SCHEDULED_MEETING,
            "start_time": request.start_at.astimezone(UTC).strftime(
                "%Y-%m-%dT%H:%M:%SZ"
            ),
            "duration": duration_minutes,
            "timezone": self.timezone,
            "agenda": f"Online coaching session hosted by {staff.name}",
            "settings": {
                "join_before_host": True,
                "waiting_room": False,
                "host_video": True,
                "participant_video": True,
                "mute_upon_entry": True,
                "approval_type": 2,
                "registrants_email_notification": False,
            },
        }
        response = await self._post_meeting(payload, access_token)
        if response.status_code == httpx.codes.UNAUTHORIZED:
            _logger.warning("Zoom rejected the cached access token; refreshing")
            self.token_cache.invalidate(self.cache_key)
            access_token = await self._get_access_token()
            response = await self._post_meeting(payload, access_token)
        _raise_for_status(response, "Zoom API error")
        data = response.json()
        join_url = data.get("join_url")
        if not join_url:
            raise RuntimeError("Zoom API did not return a join_url.")
        meeting_id = str(data["id"]) if data.get("id") is not None else None
        _logger.info("Created Zoom meeting %s for %s", meeting_id or "", staff.email)
        return ProvisionedMeeting(meet_url=join_url, external_id=meeting_id)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _post_meeting(
        self, payload: dict[str, object], access_token: str
    ) -> httpx.Response:
        return await self.http_client.post(
            f"{self.api_base_url}/users/me/meetings",
            json=payload,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=15,
        )

    async def _get_access_token(self) -> str:
        cached = self.token_cache.get(self.cache_key)
        if cached:
            return cached

        response = await self.http_client.post(
            f"{self.oauth_base_url}/oauth/token",
            params={"grant_type": "account_credentials", "account_id": self.account_id},
            auth=(str(self.client_id), str(self.client_secret)),
            timeout=15,
        )
        _raise_for_status(response, "Failed to obtain Zoom access token")
        data = response.json()
        access_token = data.get("access_token")
        if not access_token:
            raise RuntimeError("Zoom OAuth response did not include an access token.")
        expires_in = data.get("expires_in")
        if not isinstance(expires_in, int):
            expires_in = _DEFAULT_TOKEN_TTL_SECONDS
        self.token_cache.set(self.cache_key, access_token, expires_in)
        return access_token

    def _ensure_configured(self) -> None:
        if not self.is_enabled():
            raise DependencyUnavailableError(
                "The Zoom API is not configured. Please contact an administrator."
            )


def _raise_for_status(response: httpx.Response, prefix: str) -> None:
    if response.is_success:
        return
    _logger.error("%s (%s): %s", prefix, response.status_code, response.text)
    response.raise_for_status()
