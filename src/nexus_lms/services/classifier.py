"""Presentation state of sessions relative to the current time."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum

from nexus_lms.domain.schedule import Session

JOINABLE_WINDOW = timedelta(minutes=30)


class SessionStatus(StrEnum):
    """Where a session sits relative to now."""

    COMPLETED = "COMPLETED"
    JOINABLE = "JOINABLE"
    UPCOMING = "UPCOMING"


@dataclass(frozen=True)
class NextSessionInfo:
    """Earliest future session of a class."""

    session_id: str
    starts_at: datetime
    is_joinable: bool


def classify(starts_at: datetime, now: datetime) -> SessionStatus:
    """Classify a session start against now."""
    if starts_at <= now:
        return SessionStatus.COMPLETED
    if starts_at <= now + JOINABLE_WINDOW:
        return SessionStatus.JOINABLE
    return SessionStatus.UPCOMING


def classify_session(session: Session, now: datetime) -> SessionStatus:
    return classify(session.starts_at, now)


def classify_all(
    sessions: Iterable[Session], now: datetime
) -> list[tuple[Session, SessionStatus]]:
    """Pair each session with its status, preserving input order."""
    return [(session, classify(session.starts_at, now)) for session in sessions]


def upcoming(sessions: Iterable[Session], now: datetime) -> list[Session]:
    """Return sessions that have not started yet, soonest first."""
    future = [session for session in sessions if session.starts_at > now]
    return sorted(future, key=lambda session: session.starts_at)


def history(sessions: Iterable[Session]) -> list[Session]:
    """Return all sessions, most recent first."""
    return sorted(sessions, key=lambda session: session.starts_at, reverse=True)


def next_session(
    class_id: str, sessions: Iterable[Session], now: datetime
) -> NextSessionInfo | None:
    """Return the next session of a class, or None when nothing is scheduled."""
    candidates = upcoming(
        (session for session in sessions if session.class_id == class_id), now
    )
    if not candidates:
        return None
    first = candidates[0]
    return NextSessionInfo(
        session_id=first.id,
        starts_at=first.starts_at,
        is_joinable=classify(first.starts_at, now) is SessionStatus.JOINABLE,
    )
