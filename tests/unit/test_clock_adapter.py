from datetime import UTC, datetime, timedelta

from travel_cms.adapters.clock import FrozenClock, SystemClock


def test_system_clock_is_utc() -> None:
    now = SystemClock().now_utc()
    assert now.tzinfo == UTC


def test_system_clock_comparisons() -> None:
    clock = SystemClock()
    assert clock.is_past_or_now(datetime.now(UTC) - timedelta(seconds=1))
    assert clock.is_future(datetime.now(UTC) + timedelta(hours=1))


def test_frozen_clock_advance() -> None:
    clock = FrozenClock(datetime(2024, 1, 1))
    assert clock.now_utc() == datetime(2024, 1, 1, tzinfo=UTC)
    clock.advance(hours=1, minutes=30)
    assert clock.now_utc() == datetime(2024, 1, 1, 1, 30, tzinfo=UTC)


def test_frozen_clock_set() -> None:
    clock = FrozenClock(datetime(2024, 1, 1, tzinfo=UTC))
    clock.set(datetime(2025, 5, 5))
    assert clock.now_utc() == datetime(2025, 5, 5, tzinfo=UTC)
