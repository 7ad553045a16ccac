"""Supabase-backed class repository."""

from dataclasses import dataclass

from supabase import Client

from nexus_lms.domain.schedule import ClassRecord, Group, OneToOne
from nexus_lms.services.schedule import ClassRepository


@dataclass
class SupabaseClassRepository(ClassRepository):
    """Supabase implementation for group and one-to-one lookups."""

    client: Client

    def get_class(self, class_id: str) -> ClassRecord | None:
        """Return the group or one-to-one class with this id, if present."""
        group = self._get_group(class_id)
        if group is not None:
            return group
        return self._get_one_to_one(class_id)

    def _get_group(self, class_id: str) -> Group | None:
        response = (
            self.client.table("groups")
            .select("id, title, subject, teacher_id, duration_min, cap, current_size")
            .eq("id", class_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        members = (
            self.client.table("group_members")
            .select("member_id")
            .eq("group_id", class_id)
            .execute()
        )
        return Group(
            id=str(row["id"]),
            title=str(row.get("title") or ""),
            subject=str(row.get("subject") or ""),
            teacher_id=str(row["teacher_id"]),
            duration_min=int(row.get("duration_min") or 60),
            cap=int(row.get("cap") or 0),
            current_size=int(row.get("current_size") or 0),
            members=tuple(str(item["member_id"]) for item in members.data or []),
        )

    def _get_one_to_one(self, class_id: str) -> OneToOne | None:
        response = (
            self.client.table("one_to_ones")
            .select("id, title, subject, teacher_id, student_id, duration_min")
            .eq("id", class_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return OneToOne(
            id=str(row["id"]),
            title=str(row.get("title") or ""),
            subject=str(row.get("subject") or ""),
            teacher_id=str(row["teacher_id"]),
            student_id=str(row["student_id"]),
            duration_min=int(row.get("duration_min") or 45),
        )
