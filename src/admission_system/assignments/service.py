from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..audit.sink import AuditSink, student_target
from ..common.validators import optional_text, require_non_empty
from ..core.constants import SYSTEM_ACTOR
from ..core.enums import AssignmentOutcome, AuditAction, Role
from ..core.exceptions import ConflictError, NotFoundError
from ..database.unit_of_work import Transaction, UnitOfWork
from . import resolver
from .model import Assignment, AssignmentQueue, ReassignmentCandidate, UnassignedStudent

logger = logging.getLogger(__name__)


class AssignmentService:
    """Use cases on the assignment ledger.

    Every write locks the student row first, so concurrent callers on the
    same student are serialized by the database.
    """

    def __init__(self, uow: UnitOfWork, audit: AuditSink):
        self._uow = uow
        self._audit = audit

    @staticmethod
    def _lock_student(tx: Transaction, student_id: int):
        student = tx.students.get_by_id(student_id, for_update=True)
        if student is None:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    def ensure_assignment(
        self,
        *,
        student_id: int,
        unit: Optional[str],
        actor: str = SYSTEM_ACTOR,
        actor_role: Role = Role.SYSTEM,
    ) -> AssignmentOutcome:
        unit = optional_text(unit)

        with self._uow.begin() as tx:
            self._lock_student(tx, student_id)
            current = tx.assignments.get_for_student(student_id, for_update=True)
            try:
                outcome, write = resolver.plan_ensure(current, unit=unit, actor=actor)
            except ConflictError as e:
                logger.debug("ensure_assignment left student %s unchanged: %s", student_id, e)
                return AssignmentOutcome.UNCHANGED

            if outcome == AssignmentOutcome.CREATED:
                tx.assignments.create(student_id=student_id, write=write)
            elif not tx.assignments.repair(student_id=student_id, write=write):
                return AssignmentOutcome.UNCHANGED

        logger.info("Assignment %s for student %s (unit=%r)", outcome.value.lower(), student_id, unit)
        self._audit.record(AuditAction.ASSIGNMENT_ENSURED, actor, actor_role, student_target(student_id))
        return outcome

    def assign_to_sub_admin(self, *, student_id: int, unit: str, sub_admin: str, admin: str) -> Assignment:
        unit = require_non_empty(unit, "Unit")
        sub_admin = require_non_empty(sub_admin, "Sub-admin")
        admin = require_non_empty(admin, "Admin")

        write = resolver.plan_sub_admin(unit=unit, sub_admin=sub_admin, admin=admin)
        with self._uow.begin() as tx:
            self._lock_student(tx, student_id)
            tx.assignments.overwrite(student_id=student_id, write=write)
            assignment = tx.assignments.get_for_student(student_id)

        logger.info("Student %s assigned to sub-admin %s (unit=%r) by %s", student_id, sub_admin, unit, admin)
        self._audit.record(AuditAction.ASSIGNED_TO_SUB_ADMIN, admin, Role.SUPER_ADMIN, student_target(student_id))
        return assignment

    def reassign(
        self,
        *,
        student_id: int,
        new_unit: str,
        new_teacher: Optional[str],
        admin: str,
    ) -> None:
        new_unit = require_non_empty(new_unit, "New unit")
        new_teacher = optional_text(new_teacher)

        with self._uow.begin() as tx:
            self._lock_student(tx, student_id)
            current = resolver.require_existing(
                tx.assignments.get_for_student(student_id, for_update=True),
                student_id,
            )
            tx.assignments.update_unit_and_teacher(student_id=student_id, unit=new_unit, teacher=new_teacher)

        logger.info(
            "Student %s reassigned %r/%r -> %r/%r by %s",
            student_id,
            current.unit,
            current.teacher,
            new_unit,
            new_teacher,
            admin,
        )
        self._audit.record(AuditAction.STUDENT_REASSIGNED, admin, Role.SUPER_ADMIN, student_target(student_id))

    def get_for_student(self, student_id: int) -> Optional[Assignment]:
        with self._uow.begin() as tx:
            return tx.assignments.get_for_student(student_id)

    def classify(self, student_id: int) -> AssignmentQueue:
        with self._uow.begin() as tx:
            student = tx.students.get_by_id(student_id)
            if student is None:
                raise NotFoundError(f"Student {student_id} not found")
            assignment = tx.assignments.get_for_student(student_id)
        return resolver.classify(student, assignment)

    def list_unassigned(self) -> Sequence[UnassignedStudent]:
        with self._uow.begin() as tx:
            return list(tx.assignments.list_unassigned())

    def list_reassignment_queue(self) -> Sequence[ReassignmentCandidate]:
        with self._uow.begin() as tx:
            return list(tx.assignments.list_reassignment_queue())
