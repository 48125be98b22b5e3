from __future__ import annotations

from typing import Protocol, Sequence, Tuple

from .model import GroupCount


class DashboardRepository(Protocol):
    def count_students(self) -> Tuple[int, int]:
        """Return (total, completed)."""

        raise NotImplementedError

    def summary_by_unit(self) -> Sequence[GroupCount]:
        raise NotImplementedError

    def summary_by_teacher(self) -> Sequence[GroupCount]:
        raise NotImplementedError

    def teacher_call_counts(self, teacher: str) -> Tuple[int, int]:
        """Return (distinct students called, distinct students logged Completed)."""

        raise NotImplementedError
