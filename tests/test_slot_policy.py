"""Tests for slot policy validation."""

from datetime import UTC, datetime, timedelta

import pytest

from coaching_scheduler.domain.errors import InvalidInputError
from coaching_scheduler.services.slots import SlotPolicy
from tests.conftest import FIXED_NOW


@pytest.mark.parametrize("hour", range(10, 19))
def test_window_accepts_every_bookable_hour(hour: int) -> None:
    policy = SlotPolicy()

    window = policy.compute_slot_window(
        f"2025-12-01T{hour:02d}:00:00+09:00", now=FIXED_NOW
    )

    assert window.end_at - window.start_at == timedelta(minutes=60)
    assert window.start_at.astimezone(policy.tz).hour == hour


def test_window_interprets_naive_time_in_business_timezone() -> None:
    window = SlotPolicy().compute_slot_window("2025-12-01T10:00:00", now=FIXED_NOW)

    assert window.start_at == datetime(2025, 12, 1, 1, 0, tzinfo=UTC)


def test_window_accepts_utc_designator() -> None:
    window = SlotPolicy().compute_slot_window("2025-12-01T01:00:00Z", now=FIXED_NOW)

    assert window.start_at.astimezone(UTC).hour == 1


def test_window_accepts_datetime_objects() -> None:
    start = datetime(2025, 12, 2, 5, 0, tzinfo=UTC)

    window = SlotPolicy().compute_slot_window(start, now=FIXED_NOW)

    assert window.start_at == start
    assert window.end_at == start + timedelta(hours=1)


@pytest.mark.parametrize(
    "value",
    [
        "2025-12-01T09:00:00+09:00",
        "2025-12-01T19:00:00+09:00",
        "2025-12-01T23:00:00+09:00",
        "2025-12-02T00:00:00+09:00",
    ],
)
def test_window_rejects_hours_outside_business_window(value: str) -> None:
    with pytest.raises(InvalidInputError, match="Bookable hours"):
        SlotPolicy().compute_slot_window(value, now=FIXED_NOW)


@pytest.mark.parametrize(
    "value",
    [
        "2025-12-01T10:30:00+09:00",
        "2025-12-01T10:00:15+09:00",
        "2025-12-01T10:00:00.250000+09:00",
    ],
)
def test_window_rejects_off_boundary_starts(value: str) -> None:
    with pytest.raises(InvalidInputError, match="on the hour"):
        SlotPolicy().compute_slot_window(value, now=FIXED_NOW)


@pytest.mark.parametrize("value", ["not-a-date", "", "2025-13-01T10:00:00+09:00"])
def test_window_rejects_unparseable_values(value: str) -> None:
    with pytest.raises(InvalidInputError, match="format"):
        SlotPolicy().compute_slot_window(value, now=FIXED_NOW)


def test_window_rejects_past_times_before_other_rules() -> None:
    with pytest.raises(InvalidInputError, match="past"):
        SlotPolicy().compute_slot_window("2025-11-27T10:30:00+09:00", now=FIXED_NOW)


def test_window_enforces_booking_horizon() -> None:
    policy = SlotPolicy()

    inside = policy.compute_slot_window("2025-12-07T18:00:00+09:00", now=FIXED_NOW)
    assert inside.start_at.astimezone(policy.tz).day == 7

    with pytest.raises(InvalidInputError, match="10 days"):
        policy.compute_slot_window("2025-12-09T10:00:00+09:00", now=FIXED_NOW)


def test_window_respects_custom_policy() -> None:
    policy = SlotPolicy(
        timezone_name="UTC", start_hour=8, end_hour=12, horizon_days=2
    )

    window = policy.compute_slot_window("2025-11-28T08:00:00Z", now=FIXED_NOW)

    assert window.start_at.hour == 8
    with pytest.raises(InvalidInputError):
        policy.compute_slot_window("2025-11-28T12:00:00Z", now=FIXED_NOW)


def test_day_start_is_local_midnight() -> None:
    day_start = SlotPolicy().day_start("2025-12-01")

    assert day_start.astimezone(UTC) == datetime(2025, 11, 30, 15, 0, tzinfo=UTC)


@pytest.mark.parametrize("value", [None, "", "12/01/2025"])
def test_day_start_rejects_missing_or_malformed_dates(value: str | None) -> None:
    with pytest.raises(InvalidInputError):
        SlotPolicy().day_start(value)


def test_day_slots_cover_bookable_hours() -> None:
    policy = SlotPolicy()

    slots = policy.day_slots(policy.day_start("2025-12-01"))

    assert [slot.hour for slot in slots] == list(range(10, 19))


def test_slot_key_buckets_by_hour() -> None:
    policy = SlotPolicy()
    start = datetime(2025, 12, 1, 1, 0, tzinfo=UTC)

    assert policy.slot_key(start) == policy.slot_key(start + timedelta(minutes=59))
    assert policy.slot_key(start) != policy.slot_key(start + timedelta(hours=1))
