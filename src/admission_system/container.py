from __future__ import annotations

from dataclasses import dataclass

from .assignments.service import AssignmentService
from .audit.sink import AuditSink, MySQLAuditSink
from .calls.service import CallService
from .dashboard.mysql_dashboard_repository import MySQLDashboardRepository
from .dashboard.repository import DashboardRepository
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .database.unit_of_work import MySQLUnitOfWork, UnitOfWork
from .students.importer import StudentImportService
from .students.service import StudentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    uow: UnitOfWork
    audit: AuditSink

    users_repo: UserRepository
    dashboard_repo: DashboardRepository

    auth_service: AuthService
    user_service: UserService
    student_service: StudentService
    student_import_service: StudentImportService
    assignment_service: AssignmentService
    call_service: CallService
    dashboard_service: DashboardService


def wire(
    *,
    uow: UnitOfWork,
    audit: AuditSink,
    users_repo: UserRepository,
    dashboard_repo: DashboardRepository,
) -> Container:
    """Build services on top of already constructed repositories."""
    student_service = StudentService(uow, audit)
    assignment_service = AssignmentService(uow, audit)

    return Container(
        uow=uow,
        audit=audit,
        users_repo=users_repo,
        dashboard_repo=dashboard_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, audit),
        student_service=student_service,
        student_import_service=StudentImportService(student_service, assignment_service, audit),
        assignment_service=assignment_service,
        call_service=CallService(uow, audit),
        dashboard_service=DashboardService(dashboard_repo),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return wire(
        uow=MySQLUnitOfWork(conn),
        audit=MySQLAuditSink(conn),
        users_repo=MySQLUserRepository(conn),
        dashboard_repo=MySQLDashboardRepository(conn),
    )
