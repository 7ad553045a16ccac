"""Pydantic models for the schedule API."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from nexus_lms.domain.schedule import ClassType, GenerationRequest, Session, TimeSlot
from nexus_lms.services.classifier import NextSessionInfo, SessionStatus, classify


class SessionBatchIn(BaseModel):
    """Authoring payload for a single or recurring batch of sessions."""

    title: str = Field(min_length=1)
    class_id: str = Field(min_length=1)
    teacher_id: str | None = None
    attendees: list[str] = Field(default_factory=list)
    duration_min: int | None = None
    chess_enabled: bool = False
    single_date: date | None = None
    single_time: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    time_slots: list[TimeSlot] = Field(default_factory=list)

    def to_request(self) -> GenerationRequest:
        """Convert the payload into a domain generation request."""
        return GenerationRequest(
            title=self.title,
            class_id=self.class_id,
            teacher_id=self.teacher_id or "",
            attendees=tuple(self.attendees),
            duration_min=self.duration_min,
            chess_enabled=self.chess_enabled,
            single_date=self.single_date,
            single_time=self.single_time,
            start_date=self.start_date,
            end_date=self.end_date,
            time_slots=tuple(self.time_slots),
        )


class SessionOut(BaseModel):
    """Session as returned by the API."""

    id: str
    class_id: str
    type: ClassType
    title: str
    teacher_id: str
    attendees: list[str]
    starts_at: datetime
    ends_at: datetime
    is_chess_enabled: bool
    status: SessionStatus

    @classmethod
    def from_session(cls, session: Session, now: datetime) -> "SessionOut":
        return cls(
            id=session.id,
            class_id=session.class_id,
            type=session.class_type,
            title=session.title,
            teacher_id=session.teacher_id,
            attendees=list(session.attendees),
            starts_at=session.starts_at,
            ends_at=session.ends_at,
            is_chess_enabled=session.is_chess_enabled,
            status=classify(session.starts_at, now),
        )


def serialize_session(session: Session, now: datetime) -> dict[str, object]:
    """Return a JSON-ready session payload with its status."""
    return SessionOut.from_session(session, now).model_dump(mode="json")


def serialize_next_session(info: NextSessionInfo | None) -> dict[str, object] | None:
    """Return a JSON-ready next-session payload."""
    if info is None:
        return None
    return {
        "session_id": info.session_id,
        "starts_at": info.starts_at.isoformat(),
        "is_joinable": info.is_joinable,
    }
