"""Slot policy: bookable hours, slot granularity and booking horizon."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from coaching_scheduler.domain.errors import InvalidInputError
from coaching_scheduler.domain.sessions import SlotWindow

_MINUTES_PER_HOUR = 60


@dataclass(frozen=True)
class SlotPolicy:
    """Fixed-duration slots inside one timezone-bound business calendar."""

    timezone_name: str = "Asia/Tokyo"
    start_hour: int = 10
    end_hour: int = 19
    duration_minutes: int = 60
    horizon_days: int = 10

    @property
    def tz(self) -> ZoneInfo:
        """Business timezone."""
        return ZoneInfo(self.timezone_name)

    @property
    def duration(self) -> timedelta:
        """Length of one slot."""
        return timedelta(minutes=self.duration_minutes)

    def compute_slot_window(
        self, requested_start: str | datetime, now: datetime | None = None
    ) -> SlotWindow:
        """Validate a requested start and return its slot window.

        Checks run in a fixed order so callers always see the first rule the
        request breaks: parseable, not in the past, within the horizon, on a
        slot boundary, inside bookable hours.
        """
        start_at = self._parse_timestamp(requested_start)
        current = now or datetime.now(tz=UTC)
        if start_at < current:
            raise InvalidInputError("Bookings cannot be made for a past time.")
        if start_at > current + timedelta(days=self.horizon_days):
            raise InvalidInputError(
                f"Bookings can be made at most {self.horizon_days} days ahead."
            )

        local = start_at.astimezone(self.tz)
        minute_of_day = local.hour * _MINUTES_PER_HOUR + local.minute
        if (
            minute_of_day % self.duration_minutes
            or local.second
            or local.microsecond
        ):
            raise InvalidInputError(
                "Slots start on the hour. Please choose a time ending in :00."
            )
        if not self.start_hour <= local.hour < self.end_hour:
            raise InvalidInputError(
                f"Bookable hours are {self.start_hour:02d}:00-"
                f"{self.end_hour:02d}:00."
            )
        return SlotWindow(start_at=start_at, end_at=start_at + self.duration)

    def day_start(self, date_iso: str | None) -> datetime:
        """Return local midnight for a YYYY-MM-DD date."""
        if not date_iso:
            raise InvalidInputError("Please specify a date.")
        try:
            day = date.fromisoformat(date_iso.strip())
        except ValueError as exc:
            raise InvalidInputError(
                "Invalid date format. Use YYYY-MM-DD."
            ) from exc
        return datetime.combine(day, time(), tzinfo=self.tz)

    def day_slots(self, day_start: datetime) -> list[datetime]:
        """Enumerate bookable slot starts for the day beginning at day_start."""
        first = self.start_hour * _MINUTES_PER_HOUR
        last = self.end_hour * _MINUTES_PER_HOUR
        return [
            day_start + timedelta(minutes=offset)
            for offset in range(first, last, self.duration_minutes)
        ]

    def slot_key(self, moment: datetime) -> int:
        """Bucket a timestamp into its slot index since the epoch."""
        return int(moment.timestamp() // self.duration.total_seconds())

    def _parse_timestamp(self, value: str | datetime) -> datetime:
        if isinstance(value, datetime):
            parsed = value
        else:
            try:
                parsed = datetime.fromisoformat(str(value).strip())
            except ValueError as exc:
                raise InvalidInputError("Invalid date/time format.") from exc
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=self.tz)
        return parsed
