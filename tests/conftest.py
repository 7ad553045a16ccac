"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from nexus_lms.config import Settings
from nexus_lms.containers import AppContainer
from nexus_lms.domain.schedule import ClassRecord, ClassType, Group, OneToOne, Session
from nexus_lms.services.clock import Clock
from nexus_lms.services.materializer import SessionMaterializer
from nexus_lms.services.schedule import (
    ClassRepository,
    ScheduleService,
    SessionRepository,
)

# Tuesday morning, well before the dates used by the tests.
REFERENCE_NOW = datetime(2030, 1, 1, 8, 0, tzinfo=UTC)


@dataclass
class FixedClock(Clock):
    """Clock frozen at a given instant."""

    current: datetime = REFERENCE_NOW

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current = self.current + delta


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory session repository for tests."""

    sessions: list[Session] = field(default_factory=list)
    batches: list[list[Session]] = field(default_factory=list)

    def list_sessions(self) -> list[Session]:
        return list(self.sessions)

    def list_class_sessions(self, class_id: str) -> list[Session]:
        return [session for session in self.sessions if session.class_id == class_id]

    def get_session(self, session_id: str) -> Session | None:
        for session in self.sessions:
            if session.id == session_id:
                return session
        return None

    def add_sessions(self, sessions: list[Session]) -> None:
        self.batches.append(list(sessions))
        self.sessions.extend(sessions)


@dataclass
class InMemoryClassRepository(ClassRepository):
    """In-memory class repository for tests."""

    classes: dict[str, ClassRecord] = field(default_factory=dict)

    def add(self, class_record: ClassRecord) -> ClassRecord:
        self.classes[class_record.id] = class_record
        return class_record

    def get_class(self, class_id: str) -> ClassRecord | None:
        return self.classes.get(class_id)


def make_session(  # noqa: PLR0913
    session_id: str,
    class_id: str = "g_1",
    starts_at: datetime = REFERENCE_NOW + timedelta(days=1),
    attendees: tuple[str, ...] = (),
    teacher_id: str = "t_1",
    class_type: ClassType = ClassType.GROUP,
    duration_min: int = 60,
) -> Session:
    return Session(
        id=session_id,
        class_id=class_id,
        class_type=class_type,
        title="Session",
        teacher_id=teacher_id,
        attendees=attendees,
        starts_at=starts_at,
        ends_at=starts_at + timedelta(minutes=duration_min),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        admin_token="admin-token",
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def session_repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def class_repository() -> InMemoryClassRepository:
    repository = InMemoryClassRepository()
    repository.add(
        Group(
            id="g_3",
            title="IELTS Rolling Group",
            subject="IELTS",
            teacher_id="t_1",
            duration_min=60,
            cap=12,
            current_size=9,
            members=("s_20",),
        )
    )
    repository.add(
        OneToOne(
            id="p_91",
            title="1:1 Spoken English",
            subject="English",
            teacher_id="t_1",
            student_id="s_10",
            duration_min=45,
        )
    )
    return repository


@pytest.fixture
def materializer(clock: FixedClock) -> SessionMaterializer:
    return SessionMaterializer(clock=clock)


@pytest.fixture
def schedule_service(
    session_repository: InMemorySessionRepository,
    class_repository: InMemoryClassRepository,
    materializer: SessionMaterializer,
    clock: FixedClock,
) -> ScheduleService:
    return ScheduleService(
        session_repository=session_repository,
        class_repository=class_repository,
        materializer=materializer,
        clock=clock,
    )


@pytest.fixture
def container(settings: Settings, schedule_service: ScheduleService) -> AppContainer:
    return AppContainer(settings=settings, schedule_service=schedule_service)
