from __future__ import annotations

import logging
from typing import Optional, Protocol

from ..core.enums import AuditAction, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor

logger = logging.getLogger(__name__)


class AuditSink(Protocol):
    def record(
        self,
        action: AuditAction,
        performed_by: Optional[str],
        role: Optional[Role],
        target: Optional[str] = None,
    ) -> None:
        raise NotImplementedError


class MySQLAuditSink(AuditSink):
    """Best-effort audit writer.

    Uses its own connection, after the business transaction has committed.
    A failed write is logged and dropped; callers never see it.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def record(
        self,
        action: AuditAction,
        performed_by: Optional[str],
        role: Optional[Role],
        target: Optional[str] = None,
    ) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO audit_logs(action, performed_by, role, target)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (action.value, performed_by, role.value if role else None, target),
                )
        except Exception:
            logger.exception("Audit log write failed (action=%s target=%s)", action.value, target)


def student_target(student_id: int) -> str:
    return f"student_id:{int(student_id)}"
