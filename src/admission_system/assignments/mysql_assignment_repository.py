from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.mysql_base import fetchall, fetchone, lock_clause
from .model import Assignment, AssignmentWrite, ReassignmentCandidate, UnassignedStudent
from .repository import AssignmentRepository

# A row is "not actionably assigned" when any of these hold.
_UNASSIGNED_WHERE = """
    a.student_id IS NULL
    OR a.assigned_to_role IS NULL
    OR (a.assigned_to_role = 'SUB_ADMIN' AND a.teacher IS NULL)
"""


def _role(value) -> Optional[Role]:
    return Role(value) if value else None


def _role_value(role: Optional[Role]) -> Optional[str]:
    return role.value if role else None


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, cur):
        self._cur = cur

    def get_for_student(self, student_id: int, *, for_update: bool = False) -> Optional[Assignment]:
        self._cur.execute(
            f"""
            SELECT assignment_id, student_id, unit, teacher,
                   assigned_to_role, assigned_by, assigned_by_role
            FROM assignments
            WHERE student_id=%s{lock_clause(for_update)}
            """,
            (int(student_id),),
        )
        r = fetchone(self._cur)
        if not r:
            return None
        return Assignment(
            assignment_id=int(r["assignment_id"]),
            student_id=int(r["student_id"]),
            unit=r.get("unit"),
            teacher=r.get("teacher"),
            assigned_to_role=_role(r.get("assigned_to_role")),
            assigned_by=r.get("assigned_by"),
            assigned_by_role=_role(r.get("assigned_by_role")),
        )

    def create(self, *, student_id: int, write: AssignmentWrite) -> int:
        self._cur.execute(
            """
            INSERT INTO assignments(student_id, unit, teacher, assigned_to_role, assigned_by, assigned_by_role)
            VALUES(%s,%s,%s,%s,%s,%s)
            """,
            (
                int(student_id),
                write.unit,
                write.teacher,
                _role_value(write.assigned_to_role),
                write.assigned_by,
                _role_value(write.assigned_by_role),
            ),
        )
        return int(self._cur.lastrowid)

    def repair(self, *, student_id: int, write: AssignmentWrite) -> bool:
        self._cur.execute(
            """
            UPDATE assignments
            SET unit=%s, teacher=%s, assigned_to_role=%s, assigned_by=%s, assigned_by_role=%s
            WHERE student_id=%s AND (unit IS NULL OR TRIM(unit)='')
            """,
            (
                write.unit,
                write.teacher,
                _role_value(write.assigned_to_role),
                write.assigned_by,
                _role_value(write.assigned_by_role),
                int(student_id),
            ),
        )
        return self._cur.rowcount > 0

    def overwrite(self, *, student_id: int, write: AssignmentWrite) -> int:
        self._cur.execute(
            """
            INSERT INTO assignments(student_id, unit, teacher, assigned_to_role, assigned_by, assigned_by_role)
            VALUES(%s,%s,%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE
                unit=VALUES(unit),
                teacher=VALUES(teacher),
                assigned_to_role=VALUES(assigned_to_role),
                assigned_by=VALUES(assigned_by),
                assigned_by_role=VALUES(assigned_by_role)
            """,
            (
                int(student_id),
                write.unit,
                write.teacher,
                _role_value(write.assigned_to_role),
                write.assigned_by,
                _role_value(write.assigned_by_role),
            ),
        )

        # If it was an update, lastrowid can be 0; fetch assignment_id.
        if self._cur.lastrowid:
            return int(self._cur.lastrowid)

        self._cur.execute("SELECT assignment_id FROM assignments WHERE student_id=%s", (int(student_id),))
        r = fetchone(self._cur)
        return int(r["assignment_id"]) if r else 0

    def update_unit_and_teacher(self, *, student_id: int, unit: str, teacher: Optional[str]) -> bool:
        self._cur.execute(
            "UPDATE assignments SET unit=%s, teacher=%s WHERE student_id=%s",
            (unit, teacher, int(student_id)),
        )
        return self._cur.rowcount > 0

    def list_unassigned(self) -> Sequence[UnassignedStudent]:
        self._cur.execute(
            f"""
            SELECT s.student_id, s.name, s.mobile, s.preferred_unit, s.status,
                   a.unit, a.teacher, a.assigned_to_role
            FROM students s
            LEFT JOIN assignments a ON a.student_id = s.student_id
            WHERE {_UNASSIGNED_WHERE}
            ORDER BY s.student_id
            """
        )
        return [
            UnassignedStudent(
                student_id=int(r["student_id"]),
                name=r["name"],
                mobile=r["mobile"],
                preferred_unit=r.get("preferred_unit"),
                status=r["status"],
                unit=r.get("unit"),
                teacher=r.get("teacher"),
                assigned_to_role=r.get("assigned_to_role"),
            )
            for r in fetchall(self._cur)
        ]

    def list_reassignment_queue(self) -> Sequence[ReassignmentCandidate]:
        self._cur.execute(
            f"""
            SELECT s.student_id, s.name, s.mobile,
                   s.preferred_unit, a.unit AS assigned_unit, a.teacher
            FROM students s
            JOIN assignments a ON a.student_id = s.student_id
            WHERE s.preferred_unit IS NOT NULL
              AND s.preferred_unit <> a.unit
              AND NOT ({_UNASSIGNED_WHERE})
            ORDER BY s.student_id
            """
        )
        return [
            ReassignmentCandidate(
                student_id=int(r["student_id"]),
                name=r["name"],
                mobile=r["mobile"],
                preferred_unit=r["preferred_unit"],
                assigned_unit=r.get("assigned_unit"),
                teacher=r.get("teacher"),
            )
            for r in fetchall(self._cur)
        ]
