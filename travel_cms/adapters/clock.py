from datetime import UTC, datetime, timedelta


class SystemClock:
    def now_utc(self) -> datetime:
        return datetime.now(UTC)


class FrozenClock:
    """
    Deterministic clock for tests and replays.

    Time only moves when advance() or set() is called.
    """

    def __init__(self, frozen_at: datetime) -> None:
        if frozen_at.tzinfo is None:
            frozen_at = frozen_at.replace(tzinfo=UTC)
        self._now = frozen_at

    def now_utc(self) -> datetime:
        return self._now

    def advance(self, seconds: float = 0, minutes: float = 0, hours: float = 0) -> datetime:
        self._now += timedelta(seconds=seconds, minutes=minutes, hours=hours)
        return self._now

    def set(self, moment: datetime) -> None:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        self._now = moment
