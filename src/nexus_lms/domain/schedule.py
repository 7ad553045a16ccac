"""Domain models for class scheduling."""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

CLOCK_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
_CLOCK_TIME_RE = re.compile(CLOCK_TIME_PATTERN)


class Weekday(StrEnum):
    """Day of the week a recurring slot falls on."""

    SUNDAY = "Sunday"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"


# Sunday-first, unlike the Monday-first date.weekday().
WEEKDAY_INDEX: dict[Weekday, int] = {
    Weekday.SUNDAY: 0,
    Weekday.MONDAY: 1,
    Weekday.TUESDAY: 2,
    Weekday.WEDNESDAY: 3,
    Weekday.THURSDAY: 4,
    Weekday.FRIDAY: 5,
    Weekday.SATURDAY: 6,
}


def weekday_index(day: date) -> int:
    """Return the Sunday-first weekday index for a calendar date."""
    return (day.weekday() + 1) % 7


def is_clock_time(value: str) -> bool:
    """Return True when value is a 24-hour HH:MM string."""
    return bool(_CLOCK_TIME_RE.fullmatch(value))


def parse_clock_time(value: str) -> time:
    """Parse an HH:MM string into a time with zero seconds."""
    if not is_clock_time(value):
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    hours, minutes = value.split(":")
    return time(hour=int(hours), minute=int(minutes))


class TimeSlot(BaseModel):
    """Weekly recurrence rule used as input for session generation."""

    model_config = ConfigDict(frozen=True)

    day: Weekday
    start_time: str = Field(pattern=CLOCK_TIME_PATTERN)
    end_time: str | None = Field(default=None, pattern=CLOCK_TIME_PATTERN)
    slot_id: int | str | None = None

    @field_validator("day", mode="before")
    @classmethod
    def _normalize_day(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().capitalize()
        return value

    @property
    def day_index(self) -> int:
        """Return the Sunday-first index of the slot's day."""
        return WEEKDAY_INDEX[self.day]

    def start(self) -> time:
        """Return the slot start as a time of day."""
        return parse_clock_time(self.start_time)

    def with_changes(self, **changes: object) -> "TimeSlot":
        """Return a re-validated copy with the given fields replaced."""
        return TimeSlot.model_validate({**self.model_dump(), **changes})


class ClassType(StrEnum):
    """Kind of teaching relationship that owns sessions."""

    GROUP = "GROUP"
    ONE_TO_ONE = "ONE_TO_ONE"


class UserRole(StrEnum):
    """Role of the caller reading the schedule."""

    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


@dataclass(frozen=True)
class Session:
    """One concrete scheduled meeting."""

    id: str
    class_id: str
    class_type: ClassType
    title: str
    teacher_id: str
    attendees: tuple[str, ...]
    starts_at: datetime
    ends_at: datetime
    is_chess_enabled: bool = False


@dataclass(frozen=True)
class Group:
    """Group class taught to many students."""

    id: str
    title: str
    subject: str
    teacher_id: str
    duration_min: int
    cap: int
    current_size: int = 0
    members: tuple[str, ...] = ()

    @property
    def class_type(self) -> ClassType:
        return ClassType.GROUP


@dataclass(frozen=True)
class OneToOne:
    """Private class with a single student."""

    id: str
    title: str
    subject: str
    teacher_id: str
    student_id: str
    duration_min: int

    @property
    def class_type(self) -> ClassType:
        return ClassType.ONE_TO_ONE


ClassRecord = Group | OneToOne


@dataclass(frozen=True)
class GenerationRequest:
    """Authoring input for one batch of sessions.

    A request with an ``end_date`` follows the recurring path and expands
    ``time_slots`` over ``start_date..end_date``. Otherwise ``single_date``
    and ``single_time`` describe one session.
    """

    title: str
    class_id: str
    teacher_id: str = ""
    attendees: tuple[str, ...] = ()
    duration_min: int | None = None
    chess_enabled: bool = False
    class_type: ClassType = ClassType.GROUP
    single_date: date | None = None
    single_time: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    time_slots: tuple[TimeSlot, ...] = ()

    @property
    def is_recurring(self) -> bool:
        return self.end_date is not None


@dataclass(frozen=True)
class GenerationResult:
    """Sessions produced by one generation call."""

    sessions: list[Session] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.sessions
