from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note: services depend on this interface, not on a concrete database.
    """

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def create_if_absent(
        self,
        *,
        username: str,
        password_hash: str,
        role: Role,
        teacher_name: Optional[str],
        unit: Optional[str],
    ) -> bool:
        """Insert unless the username exists. Returns True when inserted."""

        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def set_password_hash(self, user_id: int, *, password_hash: str) -> bool:
        raise NotImplementedError

    def list_active_teacher_names(self, unit: str) -> Sequence[str]:
        raise NotImplementedError
