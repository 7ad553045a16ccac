"""Supabase-backed session repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from nexus_lms.domain.schedule import ClassType, Session
from nexus_lms.services.schedule import SessionRepository

_SESSION_COLUMNS = (
    "id, class_id, class_type, title, teacher_id, attendees, "
    "starts_at, ends_at, is_chess_enabled"
)


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for scheduled sessions."""

    client: Client

    def list_sessions(self) -> list[Session]:
        """Return every session ordered by start time."""
        response = (
            self.client.table("sessions")
            .select(_SESSION_COLUMNS)
            .order("starts_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def list_class_sessions(self, class_id: str) -> list[Session]:
        """Return the sessions of one class ordered by start time."""
        response = (
            self.client.table("sessions")
            .select(_SESSION_COLUMNS)
            .eq("class_id", class_id)
            .order("starts_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def get_session(self, session_id: str) -> Session | None:
        """Return a session by id, if present."""
        response = (
            self.client.table("sessions")
            .select(_SESSION_COLUMNS)
            .eq("id", session_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def add_sessions(self, sessions: list[Session]) -> None:
        """Insert a generated batch in a single request."""
        if not sessions:
            return
        response = (
            self.client.table("sessions")
            .insert([_serialize(session) for session in sessions])
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create sessions")


def _serialize(session: Session) -> dict[str, object]:
    return {
        "id": session.id,
        "class_id": session.class_id,
        "class_type": session.class_type.value,
        "title": session.title,
        "teacher_id": session.teacher_id,
        "attendees": list(session.attendees),
        "starts_at": session.starts_at.isoformat(),
        "ends_at": session.ends_at.isoformat(),
        "is_chess_enabled": session.is_chess_enabled,
    }


def _parse_row(row: dict[str, object]) -> Session:
    attendees = row.get("attendees") or []
    return Session(
        id=str(row["id"]),
        class_id=str(row["class_id"]),
        class_type=ClassType(row.get("class_type") or ClassType.GROUP),
        title=str(row.get("title") or "Session"),
        teacher_id=str(row.get("teacher_id") or ""),
        attendees=tuple(str(item) for item in attendees)
        if isinstance(attendees, list)
        else (),
        starts_at=datetime.fromisoformat(str(row["starts_at"])),
        ends_at=datetime.fromisoformat(str(row["ends_at"])),
        is_chess_enabled=bool(row.get("is_chess_enabled", False)),
    )
