from __future__ import annotations

from ..common.validators import require_non_empty
from .model import DashboardSummary, TeacherPerformance
from .repository import DashboardRepository


class DashboardService:
    def __init__(self, dashboard: DashboardRepository):
        self._dashboard = dashboard

    def summary(self) -> DashboardSummary:
        total, completed = self._dashboard.count_students()
        return DashboardSummary(
            total_students=total,
            completed_students=completed,
            unit_summary=list(self._dashboard.summary_by_unit()),
            teacher_summary=list(self._dashboard.summary_by_teacher()),
        )

    def teacher_performance(self, teacher: str) -> TeacherPerformance:
        teacher = require_non_empty(teacher, "Teacher")
        total_called, completed = self._dashboard.teacher_call_counts(teacher)
        return TeacherPerformance(teacher=teacher, total_called=total_called, completed_by_me=completed)
