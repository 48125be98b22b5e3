from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..assignments.resolver import resolve_call_status
from ..audit.sink import AuditSink, student_target
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AuditAction, Role
from ..core.exceptions import NotFoundError
from ..database.unit_of_work import UnitOfWork
from .model import CallLog, CallOutcome

logger = logging.getLogger(__name__)


class CallService:
    def __init__(self, uow: UnitOfWork, audit: AuditSink):
        self._uow = uow
        self._audit = audit

    def record_call(
        self,
        *,
        student_id: int,
        teacher: Optional[str],
        unit: Optional[str],
        call_status: str,
        remarks: Optional[str] = None,
        address: Optional[str] = None,
    ) -> CallOutcome:
        """Append a call attempt and move the student status.

        A Completed student stays Completed: the log row and the student row
        both get "Completed" whatever call_status says.
        """
        call_status = require_non_empty(call_status, "Call status")
        teacher = optional_text(teacher)

        with self._uow.begin() as tx:
            student = tx.students.get_by_id(student_id, for_update=True)
            if student is None:
                raise NotFoundError(f"Student {student_id} not found")

            final_status = resolve_call_status(student.status, call_status)
            call_id = tx.call_logs.append(
                student_id=student_id,
                teacher=teacher,
                unit=optional_text(unit),
                call_status=final_status,
                remarks=optional_text(remarks),
            )
            tx.students.update_status(
                student_id=student_id,
                status=final_status,
                address=optional_text(address),
            )

        kept = final_status != call_status
        if kept:
            logger.info("Student %s already Completed; ignored call status %r", student_id, call_status)
        self._audit.record(AuditAction.CALL_UPDATE, teacher, Role.TEACHER, student_target(student_id))
        return CallOutcome(call_id=call_id, status=final_status, kept_completed=kept)

    def history(self, student_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[CallLog]:
        with self._uow.begin() as tx:
            if tx.students.get_by_id(student_id) is None:
                raise NotFoundError(f"Student {student_id} not found")
            return list(tx.call_logs.list_for_student(student_id, limit=limit))
