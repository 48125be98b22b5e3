from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_timestamp


@dataclass(frozen=True)
class CallLog:
    """One outreach attempt. Rows are append-only."""

    call_id: int
    student_id: int
    teacher: Optional[str]
    unit: Optional[str]
    call_status: str
    remarks: Optional[str] = None
    called_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "call_id": self.call_id,
            "student_id": self.student_id,
            "teacher": self.teacher,
            "unit": self.unit,
            "call_status": self.call_status,
            "remarks": self.remarks,
            "called_at": format_timestamp(self.called_at),
        }


@dataclass(frozen=True)
class CallOutcome:
    call_id: int
    status: str
    kept_completed: bool = False

    def to_dict(self) -> dict:
        return {"call_id": self.call_id, "status": self.status, "kept_completed": self.kept_completed}
