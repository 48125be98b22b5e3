from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import ContextManager, Iterator, Protocol

from ..assignments.mysql_assignment_repository import MySQLAssignmentRepository
from ..assignments.repository import AssignmentRepository
from ..calls.mysql_call_log_repository import MySQLCallLogRepository
from ..calls.repository import CallLogRepository
from ..students.mysql_student_repository import MySQLStudentRepository
from ..students.repository import StudentRepository
from .connection import DatabaseConnection
from .mysql_base import db_cursor


class Transaction(Protocol):
    students: StudentRepository
    assignments: AssignmentRepository
    call_logs: CallLogRepository


class UnitOfWork(Protocol):
    """Scope for one atomic read-decide-write operation."""

    def begin(self) -> ContextManager[Transaction]:
        raise NotImplementedError


@dataclass(frozen=True)
class MySQLTransaction:
    students: MySQLStudentRepository
    assignments: MySQLAssignmentRepository
    call_logs: MySQLCallLogRepository


class MySQLUnitOfWork(UnitOfWork):
    """One connection and one transaction per begin() block.

    Commits when the block exits normally, rolls back on any exception and
    always releases the connection.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def begin(self) -> Iterator[MySQLTransaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            yield MySQLTransaction(
                students=MySQLStudentRepository(cur),
                assignments=MySQLAssignmentRepository(cur),
                call_logs=MySQLCallLogRepository(cur),
            )
