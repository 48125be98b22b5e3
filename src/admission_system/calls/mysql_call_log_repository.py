from __future__ import annotations

from typing import Optional, Sequence

from ..database.mysql_base import fetchall
from .model import CallLog
from .repository import CallLogRepository


class MySQLCallLogRepository(CallLogRepository):
    def __init__(self, cur):
        self._cur = cur

    def append(
        self,
        *,
        student_id: int,
        teacher: Optional[str],
        unit: Optional[str],
        call_status: str,
        remarks: Optional[str] = None,
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO call_logs(student_id, teacher, unit, call_status, remarks)
            VALUES(%s,%s,%s,%s,%s)
            """,
            (int(student_id), teacher, unit, call_status, remarks),
        )
        return int(self._cur.lastrowid)

    def list_for_student(self, student_id: int, *, limit: int) -> Sequence[CallLog]:
        self._cur.execute(
            """
            SELECT call_id, student_id, teacher, unit, call_status, remarks, called_at
            FROM call_logs
            WHERE student_id=%s
            ORDER BY called_at DESC, call_id DESC
            LIMIT %s
            """,
            (int(student_id), int(limit)),
        )
        return [
            CallLog(
                call_id=int(r["call_id"]),
                student_id=int(r["student_id"]),
                teacher=r.get("teacher"),
                unit=r.get("unit"),
                call_status=r["call_status"],
                remarks=r.get("remarks"),
                called_at=r.get("called_at"),
            )
            for r in fetchall(self._cur)
        ]
