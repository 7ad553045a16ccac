"""Tests for session materialization."""

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from nexus_lms.domain.schedule import GenerationRequest, TimeSlot, Weekday
from nexus_lms.errors import ScheduleValidationError
from nexus_lms.services.materializer import (
    NO_MATCHING_SLOTS_WARNING,
    SessionMaterializer,
    merge_sessions,
)
from tests.conftest import FixedClock, make_session


def _recurring(
    start: date, end: date, slots: list[TimeSlot], duration_min: int = 60
) -> GenerationRequest:
    return GenerationRequest(
        title="IELTS Rolling Group",
        class_id="g_3",
        teacher_id="t_1",
        attendees=("s_1", "s_2"),
        duration_min=duration_min,
        start_date=start,
        end_date=end,
        time_slots=tuple(slots),
    )


def _single(
    day: date | None, at: str | None, duration_min: int = 45
) -> GenerationRequest:
    return GenerationRequest(
        title="1:1 Spoken English",
        class_id="p_91",
        teacher_id="t_1",
        attendees=("s_10",),
        duration_min=duration_min,
        single_date=day,
        single_time=at,
    )


def test_single_future_session(materializer: SessionMaterializer) -> None:
    result = materializer.materialize(_single(date(2030, 1, 3), "17:15"))

    assert len(result.sessions) == 1
    session = result.sessions[0]
    assert session.starts_at == datetime(2030, 1, 3, 17, 15, tzinfo=UTC)
    assert session.ends_at - session.starts_at == timedelta(minutes=45)
    assert session.attendees == ("s_10",)
    assert session.id == f"sess_p_91_{int(session.starts_at.timestamp() * 1000)}"
    assert result.warnings == []


@pytest.mark.parametrize(
    ("day", "at"), [(None, "10:00"), (date(2030, 1, 3), None), (date(2030, 1, 3), "")]
)
def test_single_requires_date_and_time(
    materializer: SessionMaterializer, day: date | None, at: str | None
) -> None:
    with pytest.raises(ScheduleValidationError):
        materializer.materialize(_single(day, at))


def test_single_rejects_malformed_time(materializer: SessionMaterializer) -> None:
    with pytest.raises(ScheduleValidationError):
        materializer.materialize(_single(date(2030, 1, 3), "25:00"))


def test_single_rejects_past_start(materializer: SessionMaterializer) -> None:
    with pytest.raises(ScheduleValidationError):
        materializer.materialize(_single(date(2030, 1, 1), "08:00"))


def test_rejects_non_positive_duration(materializer: SessionMaterializer) -> None:
    with pytest.raises(ScheduleValidationError):
        materializer.materialize(_single(date(2030, 1, 3), "10:00", duration_min=0))


def test_recurring_two_weeks_monday_and_wednesday(
    materializer: SessionMaterializer,
) -> None:
    slots = [
        TimeSlot(day=Weekday.MONDAY, start_time="10:00", slot_id=1),
        TimeSlot(day=Weekday.WEDNESDAY, start_time="14:00", slot_id=2),
    ]

    result = materializer.materialize(
        _recurring(date(2030, 1, 6), date(2030, 1, 19), slots)
    )

    assert [s.starts_at for s in result.sessions] == [
        datetime(2030, 1, 7, 10, 0, tzinfo=UTC),
        datetime(2030, 1, 9, 14, 0, tzinfo=UTC),
        datetime(2030, 1, 14, 10, 0, tzinfo=UTC),
        datetime(2030, 1, 16, 14, 0, tzinfo=UTC),
    ]
    assert [s.starts_at.strftime("%A") for s in result.sessions] == [
        "Monday",
        "Wednesday",
        "Monday",
        "Wednesday",
    ]
    assert all(
        s.ends_at - s.starts_at == timedelta(minutes=60) for s in result.sessions
    )
    assert result.sessions[0].id.startswith("sess_g_3_")
    assert result.sessions[0].id.endswith("_1")
    assert result.sessions[1].id.endswith("_2")
    assert len({s.id for s in result.sessions}) == 4


def test_recurring_drops_occurrences_not_after_now() -> None:
    clock = FixedClock(datetime(2030, 1, 7, 12, 0, tzinfo=UTC))
    materializer = SessionMaterializer(clock=clock)
    slots = [
        TimeSlot(day=Weekday.MONDAY, start_time="10:00"),
        TimeSlot(day=Weekday.MONDAY, start_time="12:00"),
        TimeSlot(day=Weekday.MONDAY, start_time="14:00"),
    ]

    result = materializer.materialize(
        _recurring(date(2029, 12, 31), date(2030, 1, 14), slots)
    )

    assert all(s.starts_at > clock.now() for s in result.sessions)
    assert [s.starts_at for s in result.sessions] == [
        datetime(2030, 1, 7, 14, 0, tzinfo=UTC),
        datetime(2030, 1, 14, 10, 0, tzinfo=UTC),
        datetime(2030, 1, 14, 12, 0, tzinfo=UTC),
        datetime(2030, 1, 14, 14, 0, tzinfo=UTC),
    ]


def test_recurring_single_day_range(materializer: SessionMaterializer) -> None:
    slots = [TimeSlot(day=Weekday.MONDAY, start_time="10:00")]

    result = materializer.materialize(
        _recurring(date(2030, 1, 7), date(2030, 1, 7), slots)
    )

    assert len(result.sessions) == 1
    assert result.sessions[0].starts_at == datetime(2030, 1, 7, 10, 0, tzinfo=UTC)


def test_recurring_overlapping_slots_are_both_generated(
    materializer: SessionMaterializer,
) -> None:
    slots = [
        TimeSlot(day=Weekday.MONDAY, start_time="10:00"),
        TimeSlot(day=Weekday.MONDAY, start_time="10:30"),
    ]

    result = materializer.materialize(
        _recurring(date(2030, 1, 7), date(2030, 1, 7), slots)
    )

    assert len(result.sessions) == 2


def test_recurring_without_matches_returns_warning(
    materializer: SessionMaterializer,
) -> None:
    slots = [TimeSlot(day=Weekday.SATURDAY, start_time="10:00")]

    result = materializer.materialize(
        _recurring(date(2030, 1, 7), date(2030, 1, 9), slots)
    )

    assert result.is_empty
    assert result.warnings == [NO_MATCHING_SLOTS_WARNING]


def test_recurring_without_slots_returns_warning(
    materializer: SessionMaterializer,
) -> None:
    result = materializer.materialize(
        _recurring(date(2030, 1, 7), date(2030, 1, 20), [])
    )

    assert result.is_empty
    assert result.warnings


def test_recurring_rejects_inverted_range(materializer: SessionMaterializer) -> None:
    slots = [TimeSlot(day=Weekday.MONDAY, start_time="10:00")]

    with pytest.raises(ScheduleValidationError):
        materializer.materialize(_recurring(date(2030, 1, 14), date(2030, 1, 7), slots))


def test_recurring_requires_start_date(materializer: SessionMaterializer) -> None:
    request = GenerationRequest(
        title="Group",
        class_id="g_3",
        duration_min=60,
        end_date=date(2030, 1, 7),
        time_slots=(TimeSlot(day=Weekday.MONDAY, start_time="10:00"),),
    )

    with pytest.raises(ScheduleValidationError):
        materializer.materialize(request)


def test_same_inputs_and_now_give_same_times(
    materializer: SessionMaterializer,
) -> None:
    slots = [
        TimeSlot(day=Weekday.TUESDAY, start_time="09:00"),
        TimeSlot(day=Weekday.THURSDAY, start_time="16:45"),
    ]
    request = _recurring(date(2030, 1, 1), date(2030, 1, 31), slots)

    first = materializer.materialize(request)
    second = materializer.materialize(request)

    assert [(s.starts_at, s.ends_at) for s in first.sessions] == [
        (s.starts_at, s.ends_at) for s in second.sessions
    ]


def test_wall_clock_times_use_configured_timezone(clock: FixedClock) -> None:
    materializer = SessionMaterializer(clock=clock, timezone=ZoneInfo("Europe/London"))
    slots = [TimeSlot(day=Weekday.MONDAY, start_time="10:00")]

    result = materializer.materialize(
        _recurring(date(2030, 7, 1), date(2030, 7, 1), slots)
    )

    # British Summer Time is UTC+1.
    assert result.sessions[0].starts_at == datetime(2030, 7, 1, 9, 0, tzinfo=UTC)


def test_merge_sessions_sorts_by_start() -> None:
    base = datetime(2030, 2, 1, 10, 0, tzinfo=UTC)
    late = make_session("late", starts_at=base + timedelta(days=2))
    early = make_session("early", starts_at=base)
    middle = make_session("middle", starts_at=base + timedelta(days=1))

    merged = merge_sessions([late, early], [middle])

    assert [s.id for s in merged] == ["early", "middle", "late"]
