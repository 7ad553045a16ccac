"""Schedule application service."""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Protocol

from nexus_lms.domain.schedule import (
    ClassRecord,
    GenerationRequest,
    GenerationResult,
    Group,
    OneToOne,
    Session,
    UserRole,
)
from nexus_lms.errors import (
    ClassNotFoundError,
    SessionAccessDeniedError,
    SessionNotFoundError,
)
from nexus_lms.services.classifier import NextSessionInfo, next_session
from nexus_lms.services.clock import Clock
from nexus_lms.services.materializer import SessionMaterializer, merge_sessions
from nexus_lms.services.roster import resolve_roster

logger = logging.getLogger(__name__)


class SessionRepository(Protocol):
    """Persistence interface for scheduled sessions."""

    def list_sessions(self) -> list[Session]:
        """Return every stored session."""

    def list_class_sessions(self, class_id: str) -> list[Session]:
        """Return the sessions owned by a class."""

    def get_session(self, session_id: str) -> Session | None:
        """Return a session by id, if present."""

    def add_sessions(self, sessions: list[Session]) -> None:
        """Persist a generated batch of sessions."""


class ClassRepository(Protocol):
    """Lookup interface for groups and one-to-one classes."""

    def get_class(self, class_id: str) -> ClassRecord | None:
        """Return the group or one-to-one class with this id, if present."""


@dataclass
class ScheduleService:
    """Creates sessions and answers schedule queries."""

    session_repository: SessionRepository
    class_repository: ClassRepository
    materializer: SessionMaterializer
    clock: Clock

    def create_sessions(self, request: GenerationRequest) -> GenerationResult:
        """Generate and store a batch of sessions for a class.

        Missing teacher, attendees and duration are filled in from the owning
        class. Sessions that would start at the same instant as an existing
        session of the class are skipped.
        """
        class_record = self._require_class(request.class_id)
        existing = self.session_repository.list_class_sessions(request.class_id)
        request = _complete_request(request, class_record, existing)

        result = self.materializer.materialize(request)
        taken = {(session.class_id, session.starts_at) for session in existing}
        fresh = [
            session
            for session in result.sessions
            if (session.class_id, session.starts_at) not in taken
        ]
        warnings = list(result.warnings)
        skipped = len(result.sessions) - len(fresh)
        if skipped:
            logger.warning(
                "Skipped %d sessions already scheduled for class %s",
                skipped,
                request.class_id,
            )
            warnings.append(f"Skipped {skipped} sessions already scheduled.")
        if fresh:
            self.session_repository.add_sessions(fresh)
        return GenerationResult(sessions=fresh, warnings=warnings)

    def list_sessions(self) -> list[Session]:
        """Return all sessions sorted by start time."""
        return merge_sessions(self.session_repository.list_sessions(), [])

    def sessions_for_user(self, user_id: str, role: UserRole) -> list[Session]:
        """Return the caller's sessions that have not started yet.

        Teachers see every session of the classes they teach, plus sessions
        they were assigned to directly.
        """
        now = self.clock.now()
        sessions = [
            session
            for session in self.session_repository.list_sessions()
            if session.starts_at >= now
        ]
        if role is UserRole.STUDENT:
            sessions = [s for s in sessions if user_id in s.attendees]
        elif role is UserRole.TEACHER:
            taught = self._taught_class_ids(user_id, {s.class_id for s in sessions})
            sessions = [
                s for s in sessions if s.class_id in taught or s.teacher_id == user_id
            ]
        return merge_sessions(sessions, [])

    def get_session(self, session_id: str, user_id: str, role: UserRole) -> Session:
        """Return a session the caller is allowed to see."""
        session = self.session_repository.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        if role is UserRole.ADMIN:
            return session
        if user_id == session.teacher_id or user_id in session.attendees:
            return session
        class_record = self.class_repository.get_class(session.class_id)
        if class_record is not None and _belongs_to_class(user_id, class_record):
            return session
        raise SessionAccessDeniedError("You do not have access to this session")

    def roster(self, class_id: str) -> frozenset[str]:
        """Return the effective attendee set of a class."""
        class_record = self._require_class(class_id)
        return resolve_roster(
            class_record, self.session_repository.list_class_sessions(class_id)
        )

    def next_session(self, class_id: str) -> NextSessionInfo | None:
        """Return the next upcoming session of a class."""
        self._require_class(class_id)
        return next_session(
            class_id,
            self.session_repository.list_class_sessions(class_id),
            self.clock.now(),
        )

    def now(self) -> datetime:
        return self.clock.now()

    def _taught_class_ids(self, teacher_id: str, class_ids: set[str]) -> set[str]:
        taught = set()
        for class_id in class_ids:
            class_record = self.class_repository.get_class(class_id)
            if class_record is not None and class_record.teacher_id == teacher_id:
                taught.add(class_id)
        return taught

    def _require_class(self, class_id: str) -> ClassRecord:
        class_record = self.class_repository.get_class(class_id)
        if class_record is None:
            raise ClassNotFoundError(f"Class {class_id} not found")
        return class_record


def _complete_request(
    request: GenerationRequest, class_record: ClassRecord, existing: list[Session]
) -> GenerationRequest:
    attendees = request.attendees or tuple(
        sorted(resolve_roster(class_record, existing))
    )
    return replace(
        request,
        class_type=class_record.class_type,
        teacher_id=request.teacher_id or class_record.teacher_id,
        attendees=attendees,
        duration_min=(
            class_record.duration_min
            if request.duration_min is None
            else request.duration_min
        ),
    )


def _belongs_to_class(user_id: str, class_record: ClassRecord) -> bool:
    if user_id == class_record.teacher_id:
        return True
    if isinstance(class_record, OneToOne):
        return user_id == class_record.student_id
    if isinstance(class_record, Group):
        return user_id in class_record.members
    return False
