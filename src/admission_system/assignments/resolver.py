"""Assignment transition rules.

Pure functions: they look at the current ledger state and decide what to
write. Services load the state inside a transaction, call these, and persist
the result. Keeping the rules here lets them be tested without a database.
"""

from __future__ import annotations

from typing import Optional, Tuple

from ..core.constants import STATUS_COMPLETED
from ..core.enums import AssignmentOutcome, Role
from ..core.exceptions import ConflictError, NotFoundError
from ..students.model import Student
from .model import Assignment, AssignmentQueue, AssignmentWrite


def plan_ensure(
    current: Optional[Assignment],
    *,
    unit: Optional[str],
    actor: str,
) -> Tuple[AssignmentOutcome, AssignmentWrite]:
    """Create a missing row or repair an empty unit.

    Raises ConflictError when the row already has a unit (repair-only path
    never overwrites) or when there is no unit to repair with.
    """
    write = AssignmentWrite(
        unit=unit,
        teacher=None,
        assigned_to_role=Role.SUPER_ADMIN,
        assigned_by=actor,
        assigned_by_role=Role.SYSTEM,
    )

    if current is None:
        return AssignmentOutcome.CREATED, write

    if current.has_unit:
        raise ConflictError(f"Student {current.student_id} already assigned to unit {current.unit!r}")
    if not unit:
        raise ConflictError(f"No unit given to repair assignment of student {current.student_id}")

    return AssignmentOutcome.REPAIRED, write


def plan_sub_admin(*, unit: str, sub_admin: str, admin: str) -> AssignmentWrite:
    """Explicit admin decision: always replaces whatever is on the row."""
    return AssignmentWrite(
        unit=unit,
        teacher=sub_admin,
        assigned_to_role=Role.SUB_ADMIN,
        assigned_by=admin,
        assigned_by_role=Role.SUPER_ADMIN,
    )


def require_existing(current: Optional[Assignment], student_id: int) -> Assignment:
    if current is None:
        raise NotFoundError(f"Student {student_id} has no assignment to change")
    return current


def resolve_call_status(current_status: str, incoming_status: str) -> str:
    """Completed is terminal: a later call outcome cannot regress it."""
    if current_status == STATUS_COMPLETED:
        return STATUS_COMPLETED
    return incoming_status


def is_unassigned(assignment: Optional[Assignment]) -> bool:
    if assignment is None:
        return True
    if assignment.assigned_to_role is None:
        return True
    return assignment.assigned_to_role == Role.SUB_ADMIN and assignment.teacher is None


def needs_reassignment(student: Student, assignment: Optional[Assignment]) -> bool:
    # NULL on either side never compares unequal (SQL semantics).
    if is_unassigned(assignment):
        return False
    if student.preferred_unit is None or assignment.unit is None:
        return False
    return student.preferred_unit != assignment.unit


def classify(student: Student, assignment: Optional[Assignment]) -> AssignmentQueue:
    if is_unassigned(assignment):
        return AssignmentQueue.UNASSIGNED
    if needs_reassignment(student, assignment):
        return AssignmentQueue.NEEDS_REASSIGNMENT
    return AssignmentQueue.ASSIGNED
