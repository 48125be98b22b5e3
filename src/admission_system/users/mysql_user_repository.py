from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, username, password_hash, role, teacher_name, unit, is_active"


def _to_user(r: dict) -> User:
    return User(
        user_id=int(r["user_id"]),
        username=r["username"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        teacher_name=r.get("teacher_name"),
        unit=r.get("unit"),
        is_active=bool(r.get("is_active", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_if_absent(
        self,
        *,
        username: str,
        password_hash: str,
        role: Role,
        teacher_name: Optional[str],
        unit: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO users(username, password_hash, role, teacher_name, unit, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (username, password_hash, role.value, teacher_name, unit),
            )
            return cur.rowcount > 0

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY user_id")
            return [_to_user(r) for r in fetchall(cur)]

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_active=%s WHERE user_id=%s", (1 if is_active else 0, int(user_id)))
            return cur.rowcount > 0

    def set_password_hash(self, user_id: int, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0

    def list_active_teacher_names(self, unit: str) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT teacher_name
                FROM users
                WHERE role=%s AND unit=%s AND is_active=1
                ORDER BY teacher_name
                """,
                (Role.TEACHER.value, unit),
            )
            return [r["teacher_name"] for r in fetchall(cur) if r.get("teacher_name")]
