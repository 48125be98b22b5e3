from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping

from ..assignments.service import AssignmentService
from ..audit.sink import AuditSink
from ..core.constants import SYSTEM_ACTOR
from ..core.enums import AuditAction, Role
from ..core.exceptions import StoreError, ValidationError
from .service import StudentService

logger = logging.getLogger(__name__)


@dataclass
class ImportReport:
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    assignment_failed: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "count": self.processed,
            "processed": self.processed,
            "skipped": self.skipped,
            "failed": self.failed,
            "assignment_failed": self.assignment_failed,
            "errors": list(self.errors),
        }


class StudentImportService:
    """Bulk CSV import.

    Rows are committed one by one. A bad row never undoes the rows before it.
    """

    def __init__(self, students: StudentService, assignments: AssignmentService, audit: AuditSink):
        self._students = students
        self._assignments = assignments
        self._audit = audit

    def import_students(
        self,
        rows: Iterable[Mapping[str, str]],
        *,
        actor: str,
        actor_role: Role = Role.SUPER_ADMIN,
    ) -> ImportReport:
        report = ImportReport()

        # Line 1 is the CSV header.
        for line_no, raw in enumerate(rows, start=2):
            try:
                row = self._students.parse_import_row(dict(raw))
            except ValidationError as e:
                report.skipped += 1
                report.errors.append(f"line {line_no}: {e}")
                continue

            try:
                student = self._students.import_or_upsert(
                    name=row.name,
                    mobile=row.mobile,
                    address=row.address,
                    preferred_unit=row.preferred_unit,
                )
            except StoreError as e:
                logger.warning("Import line %s (mobile=%s) failed: %s", line_no, row.mobile, e)
                report.failed += 1
                report.errors.append(f"line {line_no}: {e}")
                continue

            # The student row is committed from here on.
            report.processed += 1

            # A preference already on file wins over the CSV value.
            if not student.preferred_unit:
                continue
            try:
                self._assignments.ensure_assignment(
                    student_id=student.student_id,
                    unit=student.preferred_unit,
                    actor=SYSTEM_ACTOR,
                )
            except StoreError as e:
                logger.warning(
                    "Import line %s: student %s stored but assignment failed: %s", line_no, student.student_id, e
                )
                report.assignment_failed += 1
                report.errors.append(f"line {line_no}: student {student.student_id} stored, assignment failed: {e}")

        logger.info(
            "Student import by %s: processed=%s skipped=%s failed=%s assignment_failed=%s",
            actor,
            report.processed,
            report.skipped,
            report.failed,
            report.assignment_failed,
        )
        self._audit.record(AuditAction.CSV_IMPORT_STUDENTS, actor, actor_role, f"{report.processed} rows")
        return report
