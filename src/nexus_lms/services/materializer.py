"""Expansion of authoring requests into concrete sessions."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from nexus_lms.domain.schedule import (
    GenerationRequest,
    GenerationResult,
    Session,
    TimeSlot,
    parse_clock_time,
    weekday_index,
)
from nexus_lms.errors import ScheduleValidationError
from nexus_lms.services.clock import Clock

logger = logging.getLogger(__name__)

NO_MATCHING_SLOTS_WARNING = (
    "No matching slot/day combination in range; nothing generated."
)


@dataclass
class SessionMaterializer:
    """Turns a single or weekly recurring request into sessions.

    Dates and slot times are wall-clock values in ``timezone``. Generated
    sessions carry UTC timestamps and only start strictly after the clock's
    ``now``, which is read once per call.
    """

    clock: Clock
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))

    def materialize(self, request: GenerationRequest) -> GenerationResult:
        """Produce the sessions described by a request, sorted by start."""
        duration = _require_duration(request.duration_min)
        now = self.clock.now()
        if request.is_recurring:
            return self._materialize_recurring(request, duration, now)
        return self._materialize_single(request, duration, now)

    def _materialize_single(
        self, request: GenerationRequest, duration: timedelta, now: datetime
    ) -> GenerationResult:
        if request.single_date is None or not request.single_time:
            raise ScheduleValidationError(
                "Please provide a valid date and time for the session."
            )
        at = _parse_time(request.single_time)
        starts_at = self._localize(request.single_date, at)
        if starts_at <= now:
            raise ScheduleValidationError("Session start must be in the future.")
        session = _build_session(
            request, _session_id(request, starts_at), starts_at, duration
        )
        logger.info(
            "Generated single session %s for class %s", session.id, request.class_id
        )
        return GenerationResult(sessions=[session])

    def _materialize_recurring(
        self, request: GenerationRequest, duration: timedelta, now: datetime
    ) -> GenerationResult:
        start_date, end_date = request.start_date, request.end_date
        if start_date is None or end_date is None:
            raise ScheduleValidationError(
                "Recurring sessions need both a start date and an end date."
            )
        if start_date > end_date:
            raise ScheduleValidationError("Start date must not be after end date.")

        sessions: list[Session] = []
        for offset in range((end_date - start_date).days + 1):
            day = start_date + timedelta(days=offset)
            day_index = weekday_index(day)
            for position, slot in enumerate(request.time_slots):
                if slot.day_index != day_index:
                    continue
                starts_at = self._localize(day, slot.start())
                if starts_at <= now:
                    continue
                session_id = _session_id(
                    request, starts_at, _discriminator(slot, position)
                )
                sessions.append(
                    _build_session(request, session_id, starts_at, duration)
                )

        if not sessions:
            logger.warning(
                "Recurring request for class %s matched no future slots in %s..%s",
                request.class_id,
                start_date,
                end_date,
            )
            return GenerationResult(warnings=[NO_MATCHING_SLOTS_WARNING])

        sessions.sort(key=lambda session: session.starts_at)
        logger.info(
            "Generated %d recurring sessions for class %s",
            len(sessions),
            request.class_id,
        )
        return GenerationResult(sessions=sessions)

    def _localize(self, day: date, at: time) -> datetime:
        return datetime.combine(day, at, tzinfo=self.timezone).astimezone(UTC)


def merge_sessions(
    existing: Iterable[Session], generated: Iterable[Session]
) -> list[Session]:
    """Return existing and generated sessions sorted ascending by start."""
    return sorted([*existing, *generated], key=lambda session: session.starts_at)


def _require_duration(duration_min: int | None) -> timedelta:
    if duration_min is None or duration_min <= 0:
        raise ScheduleValidationError(
            "Duration must be a positive number of minutes."
        )
    return timedelta(minutes=duration_min)


def _parse_time(value: str) -> time:
    try:
        return parse_clock_time(value)
    except ValueError as exc:
        raise ScheduleValidationError(str(exc)) from exc


def _discriminator(slot: TimeSlot, position: int) -> str:
    return str(slot.slot_id) if slot.slot_id is not None else str(position)


def _epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _session_id(
    request: GenerationRequest, starts_at: datetime, discriminator: str | None = None
) -> str:
    """Build an id unique across classes: ``sess_<class>_<ms>[_<slot>]``."""
    session_id = f"sess_{request.class_id}_{_epoch_millis(starts_at)}"
    if discriminator is None:
        return session_id
    return f"{session_id}_{discriminator}"


def _build_session(
    request: GenerationRequest,
    session_id: str,
    starts_at: datetime,
    duration: timedelta,
) -> Session:
    return Session(
        id=session_id,
        class_id=request.class_id,
        class_type=request.class_type,
        title=request.title,
        teacher_id=request.teacher_id,
        attendees=tuple(request.attendees),
        starts_at=starts_at,
        ends_at=starts_at + duration,
        is_chess_enabled=request.chess_enabled,
    )
