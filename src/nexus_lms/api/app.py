"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nexus_lms.api.admin import router as admin_router
from nexus_lms.api.schedule import router as schedule_router
from nexus_lms.app_logging import configure_logging
from nexus_lms.containers import AppContainer
from nexus_lms.errors import (
    ClassNotFoundError,
    ScheduleError,
    ScheduleValidationError,
    SessionAccessDeniedError,
    SessionNotFoundError,
)

_ERROR_STATUS: list[tuple[type[ScheduleError], int]] = [
    (ScheduleValidationError, 422),
    (ClassNotFoundError, 404),
    (SessionNotFoundError, 404),
    (SessionAccessDeniedError, 403),
]


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    app.include_router(admin_router)
    app.include_router(schedule_router)

    @app.exception_handler(ScheduleError)
    async def schedule_error_handler(
        request: Request, exc: ScheduleError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        logger.info(
            "%s %s rejected with %d: %s",
            request.method,
            request.url.path,
            status_code,
            exc,
        )
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _status_for(exc: ScheduleError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 400
