"""Clock adapters."""

from datetime import datetime
from zoneinfo import ZoneInfo


class SystemClock:
    """
    Wall clock in a configured timezone.

    Implements Clock protocol. Returns naive local times so that date and
    hour comparisons happen in the user's timezone.
    """

    def __init__(self, timezone: str | None = None):
        self._tz = ZoneInfo(timezone) if timezone else None

    def now(self) -> datetime:
        if self._tz is None:
            return datetime.now()
        return datetime.now(self._tz).replace(tzinfo=None)


class FixedClock:
    """Clock frozen at a given moment; can be moved forward by hand."""

    def __init__(self, moment: datetime):
        self.moment = moment

    def now(self) -> datetime:
        return self.moment

    def set(self, moment: datetime) -> None:
        self.moment = moment
