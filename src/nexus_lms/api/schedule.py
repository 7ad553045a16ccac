"""Schedule API endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from nexus_lms.api.admin import require_admin
from nexus_lms.api.schedule_models import (
    SessionBatchIn,
    serialize_next_session,
    serialize_session,
)
from nexus_lms.domain.schedule import UserRole

if TYPE_CHECKING:
    from nexus_lms.containers import AppContainer

router = APIRouter(tags=["schedule"])


@dataclass(frozen=True)
class Caller:
    """Identity resolved upstream and forwarded in request headers."""

    user_id: str
    role: UserRole


async def current_caller(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Caller:
    """Read the caller identity from X-User-Id and X-User-Role."""
    if not x_user_id or not x_user_role:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        role = UserRole(x_user_role.strip().upper())
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from None
    return Caller(user_id=x_user_id, role=role)


@router.post(
    "/schedule/sessions",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_sessions(
    payload: SessionBatchIn, request: Request
) -> dict[str, object]:
    """Generate sessions for a class from a single or weekly schedule."""
    container: AppContainer = request.app.state.container
    service = container.schedule_service
    result = service.create_sessions(payload.to_request())
    now = service.now()
    return {
        "sessions": [serialize_session(session, now) for session in result.sessions],
        "warnings": result.warnings,
        "generated": len(result.sessions),
    }


@router.get("/schedule/my-sessions")
async def my_sessions(
    request: Request, caller: Caller = Depends(current_caller)
) -> dict[str, object]:
    """Return the caller's upcoming sessions."""
    container: AppContainer = request.app.state.container
    service = container.schedule_service
    now = service.now()
    sessions = service.sessions_for_user(caller.user_id, caller.role)
    return {"sessions": [serialize_session(session, now) for session in sessions]}


@router.get("/schedule/{session_id}")
async def session_detail(
    session_id: str, request: Request, caller: Caller = Depends(current_caller)
) -> dict[str, object]:
    """Return one session the caller may access."""
    container: AppContainer = request.app.state.container
    service = container.schedule_service
    session = service.get_session(session_id, caller.user_id, caller.role)
    return serialize_session(session, service.now())


@router.get("/classes/{class_id}/roster")
async def class_roster(class_id: str, request: Request) -> dict[str, object]:
    """Return the effective attendees of a class."""
    container: AppContainer = request.app.state.container
    roster = container.schedule_service.roster(class_id)
    return {"class_id": class_id, "attendees": sorted(roster)}


@router.get("/classes/{class_id}/next-session")
async def class_next_session(class_id: str, request: Request) -> dict[str, object]:
    """Return the next session of a class and whether it can be joined."""
    container: AppContainer = request.app.state.container
    info = container.schedule_service.next_session(class_id)
    return {"class_id": class_id, "next_session": serialize_next_session(info)}
