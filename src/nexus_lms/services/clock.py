"""Clock abstractions."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        """Return the current timezone-aware time."""


@dataclass
class SystemClock(Clock):
    """Wall-clock implementation backed by the system time."""

    def now(self) -> datetime:
        return datetime.now(tz=UTC)
