from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Assignment, AssignmentWrite, ReassignmentCandidate, UnassignedStudent


class AssignmentRepository(Protocol):
    """Repository interface for the assignment ledger.

    Implementations are bound to one open transaction (see UnitOfWork).
    """

    def get_for_student(self, student_id: int, *, for_update: bool = False) -> Optional[Assignment]:
        raise NotImplementedError

    def create(self, *, student_id: int, write: AssignmentWrite) -> int:
        raise NotImplementedError

    def repair(self, *, student_id: int, write: AssignmentWrite) -> bool:
        """Apply write only if the stored unit is NULL or empty.

        Returns False when the row already has a unit.
        """

        raise NotImplementedError

    def overwrite(self, *, student_id: int, write: AssignmentWrite) -> int:
        """Create the row or replace every assignment field on it."""

        raise NotImplementedError

    def update_unit_and_teacher(self, *, student_id: int, unit: str, teacher: Optional[str]) -> bool:
        raise NotImplementedError

    def list_unassigned(self) -> Sequence[UnassignedStudent]:
        raise NotImplementedError

    def list_reassignment_queue(self) -> Sequence[ReassignmentCandidate]:
        raise NotImplementedError
