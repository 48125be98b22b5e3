from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Repository interface for Student.

    Implementations are bound to one open transaction (see UnitOfWork).
    """

    def get_by_id(self, student_id: int, *, for_update: bool = False) -> Optional[Student]:
        raise NotImplementedError

    def get_by_mobile(self, mobile: str, *, for_update: bool = False) -> Optional[Student]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        mobile: str,
        address: Optional[str],
        preferred_unit: Optional[str],
    ) -> int:
        raise NotImplementedError

    def set_preferred_unit(self, *, student_id: int, preferred_unit: Optional[str]) -> bool:
        raise NotImplementedError

    def fill_preferred_unit(self, *, student_id: int, preferred_unit: str) -> bool:
        """Set preferred_unit only when it is currently empty."""

        raise NotImplementedError

    def update_status(self, *, student_id: int, status: str, address: Optional[str] = None) -> bool:
        """Set status; address is only replaced when given."""

        raise NotImplementedError

    def list_for_teacher(self, teacher: str) -> Sequence[Student]:
        raise NotImplementedError
