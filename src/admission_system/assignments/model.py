from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Assignment:
    """Domain entity: the current assignment of one student.

    There is at most one row per student.
    """

    assignment_id: int
    student_id: int
    unit: Optional[str]
    teacher: Optional[str]
    assigned_to_role: Optional[Role]
    assigned_by: Optional[str] = None
    assigned_by_role: Optional[Role] = None

    @property
    def has_unit(self) -> bool:
        return bool(self.unit and self.unit.strip())

    def to_dict(self) -> dict:
        return {
            "assignment_id": self.assignment_id,
            "student_id": self.student_id,
            "unit": self.unit,
            "teacher": self.teacher,
            "assigned_to_role": self.assigned_to_role.value if self.assigned_to_role else None,
            "assigned_by": self.assigned_by,
            "assigned_by_role": self.assigned_by_role.value if self.assigned_by_role else None,
        }


@dataclass(frozen=True)
class AssignmentWrite:
    """Field values a resolver decision writes to the ledger."""

    unit: Optional[str]
    teacher: Optional[str]
    assigned_to_role: Optional[Role]
    assigned_by: Optional[str]
    assigned_by_role: Optional[Role]


class AssignmentQueue(str, Enum):
    UNASSIGNED = "UNASSIGNED"
    NEEDS_REASSIGNMENT = "NEEDS_REASSIGNMENT"
    ASSIGNED = "ASSIGNED"


@dataclass(frozen=True)
class UnassignedStudent:
    """Read-model for the unassigned view."""

    student_id: int
    name: str
    mobile: str
    preferred_unit: Optional[str]
    status: str
    unit: Optional[str] = None
    teacher: Optional[str] = None
    assigned_to_role: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "name": self.name,
            "mobile": self.mobile,
            "preferred_unit": self.preferred_unit,
            "status": self.status,
            "unit": self.unit,
            "teacher": self.teacher,
            "assigned_to_role": self.assigned_to_role,
        }


@dataclass(frozen=True)
class ReassignmentCandidate:
    """Read-model for the reassignment queue."""

    student_id: int
    name: str
    mobile: str
    preferred_unit: str
    assigned_unit: Optional[str]
    teacher: Optional[str]

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "name": self.name,
            "mobile": self.mobile,
            "preferred_unit": self.preferred_unit,
            "assigned_unit": self.assigned_unit,
            "teacher": self.teacher,
        }
