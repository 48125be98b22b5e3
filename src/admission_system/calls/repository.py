from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CallLog


class CallLogRepository(Protocol):
    def append(
        self,
        *,
        student_id: int,
        teacher: Optional[str],
        unit: Optional[str],
        call_status: str,
        remarks: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_student(self, student_id: int, *, limit: int) -> Sequence[CallLog]:
        """Newest first."""

        raise NotImplementedError
