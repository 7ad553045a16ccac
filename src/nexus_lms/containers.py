"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from nexus_lms.adapters.supabase_class_repository import SupabaseClassRepository
from nexus_lms.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from nexus_lms.config import Settings, parse_timezone
from nexus_lms.services.clock import SystemClock
from nexus_lms.services.materializer import SessionMaterializer
from nexus_lms.services.schedule import ScheduleService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    schedule_service: ScheduleService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_repository = SupabaseSessionRepository(supabase_client)
    class_repository = SupabaseClassRepository(supabase_client)
    clock = SystemClock()
    materializer = SessionMaterializer(
        clock=clock,
        timezone=parse_timezone(resolved_settings.schedule_timezone),
    )
    schedule_service = ScheduleService(
        session_repository=session_repository,
        class_repository=class_repository,
        materializer=materializer,
        clock=clock,
    )
    return AppContainer(
        settings=resolved_settings,
        schedule_service=schedule_service,
    )
