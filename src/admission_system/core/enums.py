from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles carried by users, assignments and audit entries."""

    SUPER_ADMIN = "SUPER_ADMIN"
    SUB_ADMIN = "SUB_ADMIN"
    TEACHER = "TEACHER"
    SYSTEM = "SYSTEM"


class AssignmentOutcome(str, Enum):
    """What ensure_assignment did to the ledger."""

    CREATED = "CREATED"
    REPAIRED = "REPAIRED"
    UNCHANGED = "UNCHANGED"


class AuditAction(str, Enum):
    PREFERRED_UNIT_CHANGED = "PREFERRED_UNIT_CHANGED"
    ASSIGNMENT_ENSURED = "ASSIGNMENT_ENSURED"
    ASSIGNED_TO_SUB_ADMIN = "ASSIGNED_TO_SUB_ADMIN"
    STUDENT_REASSIGNED = "STUDENT_REASSIGNED"
    CALL_UPDATE = "CALL_UPDATE"
    CSV_IMPORT_STUDENTS = "CSV_IMPORT_STUDENTS"
    CSV_IMPORT_USERS = "CSV_IMPORT_USERS"
    ENABLE_USER = "ENABLE_USER"
    DISABLE_USER = "DISABLE_USER"
    PASSWORD_RESET = "PASSWORD_RESET"
