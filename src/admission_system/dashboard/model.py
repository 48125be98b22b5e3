from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class GroupCount:
    """Assigned/completed counts for one unit or one teacher."""

    key: Optional[str]
    assigned: int
    completed: int


@dataclass(frozen=True)
class DashboardSummary:
    total_students: int
    completed_students: int
    unit_summary: List[GroupCount] = field(default_factory=list)
    teacher_summary: List[GroupCount] = field(default_factory=list)

    @property
    def pending_students(self) -> int:
        return self.total_students - self.completed_students

    def to_dict(self) -> dict:
        return {
            "total_students": self.total_students,
            "completed_students": self.completed_students,
            "pending_students": self.pending_students,
            "unit_summary": [
                {"unit": g.key, "assigned": g.assigned, "completed": g.completed} for g in self.unit_summary
            ],
            "teacher_summary": [
                {"teacher": g.key, "assigned": g.assigned, "completed": g.completed} for g in self.teacher_summary
            ],
        }


@dataclass(frozen=True)
class TeacherPerformance:
    teacher: str
    total_called: int
    completed_by_me: int

    def to_dict(self) -> dict:
        return {
            "teacher": self.teacher,
            "total_called": self.total_called,
            "completed_by_me": self.completed_by_me,
        }
