"""Error hierarchy for the scheduling core.

The API layer maps these to HTTP responses:
    ScheduleValidationError -> 422
    ClassNotFoundError, SessionNotFoundError -> 404
    SessionAccessDeniedError -> 403
"""


class ScheduleError(Exception):
    """Base exception for all scheduling errors."""


class ScheduleValidationError(ScheduleError, ValueError):
    """Authoring input was rejected; no sessions were produced."""


class ClassNotFoundError(ScheduleError):
    """The owning group or one-to-one class does not exist."""


class SessionNotFoundError(ScheduleError):
    """No session exists with the requested id."""


class SessionAccessDeniedError(ScheduleError):
    """The caller is not allowed to view the session."""
