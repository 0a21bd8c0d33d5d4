"""Clock abstraction used for attachment names and history timestamps."""

from abc import ABC, abstractmethod
from datetime import UTC, datetime, timedelta

ATTACHMENT_TIMESTAMP_FORMAT = "%Y-%m-%dT%H%M%S"
HISTORY_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%SUTC"


class Clock(ABC):
    """Source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time."""
        pass


class SystemClock(Clock):
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock(Clock):
    """Clock frozen at a settable instant, for tests and replays."""

    def __init__(self, instant: datetime) -> None:
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        """Move the clock to a new instant."""
        self._instant = instant

    def advance(self, **kwargs: float) -> datetime:
        """Move the clock forward by a timedelta built from kwargs."""
        self._instant = self._instant + timedelta(**kwargs)
        return self._instant


def attachment_timestamp(clock: Clock) -> str:
    """Timestamp segment of attachment names, e.g. 2010-02-20T120432."""
    return clock.now().strftime(ATTACHMENT_TIMESTAMP_FORMAT)


def history_datetime(clock: Clock) -> str:
    """History entry datetime, e.g. '2010-01-14 14:05:00UTC'."""
    return clock.now().strftime(HISTORY_DATETIME_FORMAT)
