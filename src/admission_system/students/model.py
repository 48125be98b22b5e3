from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import STATUS_COMPLETED, STATUS_NEW


@dataclass(frozen=True)
class Student:
    """Domain entity: a prospective student.

    Plain data object, no DB access here.
    """

    student_id: int
    name: str
    mobile: str
    address: Optional[str] = None
    preferred_unit: Optional[str] = None
    status: str = STATUS_NEW

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "name": self.name,
            "mobile": self.mobile,
            "address": self.address,
            "preferred_unit": self.preferred_unit,
            "status": self.status,
        }


@dataclass(frozen=True)
class StudentImportRow:
    name: str
    mobile: str
    address: Optional[str] = None
    preferred_unit: Optional[str] = None
