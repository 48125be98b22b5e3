from __future__ import annotations

from typing import Optional, Sequence

from ..database.mysql_base import fetchall, fetchone, lock_clause
from .model import Student
from .repository import StudentRepository

_COLUMNS = "s.student_id, s.name, s.mobile, s.address, s.preferred_unit, s.status"


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        name=r["name"],
        mobile=r["mobile"],
        address=r.get("address"),
        preferred_unit=r.get("preferred_unit"),
        status=r["status"],
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, cur):
        self._cur = cur

    def get_by_id(self, student_id: int, *, for_update: bool = False) -> Optional[Student]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM students s WHERE s.student_id=%s{lock_clause(for_update)}",
            (int(student_id),),
        )
        r = fetchone(self._cur)
        return _to_student(r) if r else None

    def get_by_mobile(self, mobile: str, *, for_update: bool = False) -> Optional[Student]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM students s WHERE s.mobile=%s{lock_clause(for_update)}",
            (mobile,),
        )
        r = fetchone(self._cur)
        return _to_student(r) if r else None

    def create(
        self,
        *,
        name: str,
        mobile: str,
        address: Optional[str],
        preferred_unit: Optional[str],
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO students(name, mobile, address, preferred_unit)
            VALUES(%s,%s,%s,%s)
            """,
            (name, mobile, address, preferred_unit),
        )
        return int(self._cur.lastrowid)

    def set_preferred_unit(self, *, student_id: int, preferred_unit: Optional[str]) -> bool:
        self._cur.execute(
            "UPDATE students SET preferred_unit=%s WHERE student_id=%s",
            (preferred_unit, int(student_id)),
        )
        return self._cur.rowcount > 0

    def fill_preferred_unit(self, *, student_id: int, preferred_unit: str) -> bool:
        self._cur.execute(
            """
            UPDATE students
            SET preferred_unit=%s
            WHERE student_id=%s AND (preferred_unit IS NULL OR TRIM(preferred_unit)='')
            """,
            (preferred_unit, int(student_id)),
        )
        return self._cur.rowcount > 0

    def update_status(self, *, student_id: int, status: str, address: Optional[str] = None) -> bool:
        self._cur.execute(
            """
            UPDATE students
            SET status=%s, address=COALESCE(%s, address)
            WHERE student_id=%s
            """,
            (status, address, int(student_id)),
        )
        return self._cur.rowcount > 0

    def list_for_teacher(self, teacher: str) -> Sequence[Student]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM students s
            JOIN assignments a ON a.student_id = s.student_id
            WHERE a.teacher=%s
            ORDER BY s.student_id
            """,
            (teacher,),
        )
        return [_to_student(r) for r in fetchall(self._cur)]
