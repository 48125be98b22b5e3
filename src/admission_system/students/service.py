from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..audit.sink import AuditSink, student_target
from ..common.validators import optional_text, require_non_empty
from ..core.enums import AuditAction, Role
from ..core.exceptions import NotFoundError
from ..database.unit_of_work import UnitOfWork
from .model import Student, StudentImportRow

logger = logging.getLogger(__name__)


class StudentService:
    """Use cases on the student registry."""

    def __init__(self, uow: UnitOfWork, audit: AuditSink):
        self._uow = uow
        self._audit = audit

    @staticmethod
    def parse_import_row(row: dict) -> StudentImportRow:
        """Validate one import mapping. Missing name/mobile -> ValidationError."""
        return StudentImportRow(
            name=require_non_empty(row.get("name") or "", "Name"),
            mobile=require_non_empty(row.get("mobile") or "", "Mobile"),
            address=optional_text(row.get("address")),
            preferred_unit=optional_text(row.get("preferred_unit")),
        )

    def import_or_upsert(
        self,
        *,
        name: str,
        mobile: str,
        address: Optional[str] = None,
        preferred_unit: Optional[str] = None,
    ) -> Student:
        """Insert a student, or reuse the one with the same mobile.

        An existing preferred unit is never replaced here; it is only filled
        in when it was empty. Returns the student as stored after the upsert.
        """
        row = self.parse_import_row(
            {"name": name, "mobile": mobile, "address": address, "preferred_unit": preferred_unit}
        )

        with self._uow.begin() as tx:
            existing = tx.students.get_by_mobile(row.mobile, for_update=True)
            if existing is None:
                student_id = tx.students.create(
                    name=row.name,
                    mobile=row.mobile,
                    address=row.address,
                    preferred_unit=row.preferred_unit,
                )
                logger.info("Student %s created (mobile=%s)", student_id, row.mobile)
            else:
                student_id = existing.student_id
                if row.preferred_unit and not (existing.preferred_unit or "").strip():
                    tx.students.fill_preferred_unit(student_id=student_id, preferred_unit=row.preferred_unit)
                    logger.info("Student %s preferred unit filled with %r", student_id, row.preferred_unit)
            return tx.students.get_by_id(student_id)

    def record_preference(
        self,
        *,
        student_id: int,
        preferred_unit: Optional[str],
        actor: str,
        actor_role: Role = Role.TEACHER,
    ) -> None:
        unit = optional_text(preferred_unit)

        with self._uow.begin() as tx:
            if tx.students.get_by_id(student_id, for_update=True) is None:
                raise NotFoundError(f"Student {student_id} not found")
            tx.students.set_preferred_unit(student_id=student_id, preferred_unit=unit)

        logger.info("Student %s preferred unit set to %r by %s", student_id, unit, actor)
        self._audit.record(AuditAction.PREFERRED_UNIT_CHANGED, actor, actor_role, student_target(student_id))

    def get(self, student_id: int) -> Student:
        with self._uow.begin() as tx:
            student = tx.students.get_by_id(student_id)
        if student is None:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    def list_for_teacher(self, teacher: str) -> Sequence[Student]:
        teacher = require_non_empty(teacher, "Teacher")
        with self._uow.begin() as tx:
            return list(tx.students.list_for_teacher(teacher))
