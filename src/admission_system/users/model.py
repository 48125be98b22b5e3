from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a staff account (super admin, sub-admin or teacher).

    Plain data object, no DB access here.
    """

    user_id: int
    username: str
    password_hash: str
    role: Role
    teacher_name: Optional[str] = None
    unit: Optional[str] = None
    is_active: bool = True

    def to_public_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "role": self.role.value,
            "teacher_name": self.teacher_name,
            "unit": self.unit,
            "is_active": self.is_active,
        }
