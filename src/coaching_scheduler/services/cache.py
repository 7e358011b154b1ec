"""Access-token cache shared by networked meeting providers."""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


class TokenCache(Protocol):
    """Cache interface for provider access tokens."""

    def get(self, key: str) -> str | None:
        """Return a cached token if it is still valid beyond the refresh margin."""

    def set(self, key: str, token: str, expires_in_seconds: int) -> None:
        """Store a token that the provider says expires in the given seconds."""

    def invalidate(self, key: str) -> None:
        """Drop a cached token."""


@dataclass
class _CacheEntry:
    token: str
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class AccessTokenCache(TokenCache):
    """Thread-safe in-memory token cache keyed by provider identity.

    Entries are stored with ``expiry_skew_seconds`` shaved off the lifetime the
    provider reports, and are treated as expired ``refresh_margin_seconds``
    before that, so a token is refreshed before it can lapse mid-request.
    """

    def __init__(
        self,
        refresh_margin_seconds: int = 5,
        expiry_skew_seconds: int = 60,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.refresh_margin = timedelta(seconds=refresh_margin_seconds)
        self.expiry_skew_seconds = expiry_skew_seconds
        self.clock = clock
        self._entries: dict[str, _CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        """Return a cached token unless it is within the refresh margin."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self.clock() + self.refresh_margin >= entry.expires_at:
                self._entries.pop(key, None)
                return None
            return entry.token

    def set(self, key: str, token: str, expires_in_seconds: int) -> None:
        """Store a token with a lifetime shortened by the expiry skew."""
        lifetime = max(0, expires_in_seconds - self.expiry_skew_seconds)
        expires_at = self.clock() + timedelta(seconds=lifetime)
        with self._lock:
            self._entries[key] = _CacheEntry(token=token, expires_at=expires_at)

    def invalidate(self, key: str) -> None:
        """Drop a cached token."""
        with self._lock:
            self._entries.pop(key, None)
