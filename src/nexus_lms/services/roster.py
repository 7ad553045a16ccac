"""Roster resolution for classes."""

from collections.abc import Iterable

from nexus_lms.domain.schedule import ClassRecord, OneToOne, Session


def resolve_group_roster(class_id: str, sessions: Iterable[Session]) -> frozenset[str]:
    """Return the union of attendees across a class's sessions."""
    roster: set[str] = set()
    for session in sessions:
        if session.class_id == class_id:
            roster.update(session.attendees)
    return frozenset(roster)


def resolve_roster(
    class_record: ClassRecord, sessions: Iterable[Session]
) -> frozenset[str]:
    """Return the effective attendee set of a class.

    One-to-one classes always have exactly their student. Group rosters are
    derived from scheduled sessions rather than a membership table.
    """
    if isinstance(class_record, OneToOne):
        return frozenset({class_record.student_id})
    return resolve_group_roster(class_record.id, sessions)
