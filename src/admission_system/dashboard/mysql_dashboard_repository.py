from __future__ import annotations

from typing import Sequence, Tuple

from ..core.constants import STATUS_COMPLETED
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import GroupCount
from .repository import DashboardRepository


class MySQLDashboardRepository(DashboardRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def count_students(self) -> Tuple[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total,
                       COALESCE(SUM(CASE WHEN status=%s THEN 1 ELSE 0 END), 0) AS completed
                FROM students
                """,
                (STATUS_COMPLETED,),
            )
            r = fetchone(cur) or {}
            return int(r.get("total") or 0), int(r.get("completed") or 0)

    def _grouped(self, column: str) -> Sequence[GroupCount]:
        # column is one of two fixed names, never user input.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.{column} AS group_key,
                       COUNT(*) AS assigned,
                       COALESCE(SUM(CASE WHEN s.status=%s THEN 1 ELSE 0 END), 0) AS completed
                FROM assignments a
                JOIN students s ON s.student_id = a.student_id
                GROUP BY a.{column}
                ORDER BY a.{column}
                """,
                (STATUS_COMPLETED,),
            )
            return [
                GroupCount(key=r.get("group_key"), assigned=int(r["assigned"]), completed=int(r["completed"]))
                for r in fetchall(cur)
            ]

    def summary_by_unit(self) -> Sequence[GroupCount]:
        return self._grouped("unit")

    def summary_by_teacher(self) -> Sequence[GroupCount]:
        return self._grouped("teacher")

    def teacher_call_counts(self, teacher: str) -> Tuple[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(DISTINCT student_id) AS total_called,
                       COUNT(DISTINCT CASE WHEN call_status=%s THEN student_id END) AS completed
                FROM call_logs
                WHERE teacher=%s
                """,
                (STATUS_COMPLETED, teacher),
            )
            r = fetchone(cur) or {}
            return int(r.get("total_called") or 0), int(r.get("completed") or 0)
