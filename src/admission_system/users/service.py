from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..audit.sink import AuditSink
from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import AuditAction, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, StoreError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

_ACCOUNT_ROLES = {Role.SUPER_ADMIN, Role.SUB_ADMIN, Role.TEACHER}
_HASH_METHODS = {"scrypt", "pbkdf2"}


@dataclass(frozen=True)
class SessionUser:
    """What the client keeps after login (never the password hash)."""

    user_id: int
    username: str
    role: Role
    teacher_name: Optional[str]
    unit: Optional[str]
    is_active: bool

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "role": self.role.value,
            "teacher_name": self.teacher_name,
            "unit": self.unit,
            "is_active": self.is_active,
        }


def parse_account_role(value: str) -> Role:
    try:
        role = Role(require_non_empty(value, "Role").upper())
    except ValueError:
        raise ValidationError(f"Unknown role: {value!r}")
    if role not in _ACCOUNT_ROLES:
        raise ValidationError(f"Role {role.value} cannot own an account")
    return role


def looks_hashed(value: str) -> bool:
    method = (value or "").split("$", 1)[0].split(":", 1)[0]
    return "$" in (value or "") and method in _HASH_METHODS


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user:
            raise AuthenticationError("Invalid credentials")
        if not user.is_active:
            raise AuthorizationError("Account disabled")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. a plain-text or corrupted value left in the column
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        return SessionUser(
            user_id=user.user_id,
            username=user.username,
            role=user.role,
            teacher_name=user.teacher_name,
            unit=user.unit,
            is_active=user.is_active,
        )

    def is_active(self, username: Optional[str]) -> bool:
        if not username:
            return False
        user = self._users.get_by_username(username.strip())
        return bool(user and user.is_active)


class UserService:
    """Use case: manage staff accounts (super admin)."""

    def __init__(self, users: UserRepository, audit: AuditSink):
        self._users = users
        self._audit = audit

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()

    def teachers_by_unit(self, unit: str) -> Sequence[str]:
        return self._users.list_active_teacher_names(require_non_empty(unit, "Unit"))

    def set_active(self, *, user_id: int, is_active: bool, actor: str) -> None:
        if not self._users.set_active(int(user_id), is_active=bool(is_active)):
            raise NotFoundError(f"User {user_id} not found")

        action = AuditAction.ENABLE_USER if is_active else AuditAction.DISABLE_USER
        logger.info("User %s %s by %s", user_id, "enabled" if is_active else "disabled", actor)
        self._audit.record(action, actor, Role.SUPER_ADMIN, f"user_id:{int(user_id)}")

    def reset_password(self, *, user_id: int, new_password: str, actor: str) -> None:
        require_min_length(new_password, "Password", MIN_PASSWORD_LENGTH)
        if not self._users.set_password_hash(int(user_id), password_hash=generate_password_hash(new_password)):
            raise NotFoundError(f"User {user_id} not found")
        self._audit.record(AuditAction.PASSWORD_RESET, actor, Role.SUPER_ADMIN, f"user_id:{int(user_id)}")

    def create_account(
        self,
        *,
        username: str,
        password: str,
        role: Role,
        teacher_name: Optional[str] = None,
        unit: Optional[str] = None,
    ) -> bool:
        username = require_non_empty(username, "Username")
        require_non_empty(password, "Password")
        return self._users.create_if_absent(
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
            teacher_name=optional_text(teacher_name),
            unit=optional_text(unit),
        )

    def import_users(self, rows: Iterable[Mapping[str, str]], *, actor: str) -> int:
        """Bulk CSV import. Incomplete rows are skipped, existing usernames kept."""
        inserted = 0
        for row in rows:
            try:
                role = parse_account_role(row.get("role") or "")
                created = self.create_account(
                    username=row.get("username") or "",
                    password=row.get("password") or "",
                    role=role,
                    teacher_name=row.get("teacher_name"),
                    unit=row.get("unit"),
                )
            except ValidationError as e:
                logger.debug("Skipping user row %r: %s", row.get("username"), e)
                continue
            except StoreError as e:
                logger.warning("User row %r not stored: %s", row.get("username"), e)
                continue
            if created:
                inserted += 1

        logger.info("User import by %s: inserted=%s", actor, inserted)
        self._audit.record(AuditAction.CSV_IMPORT_USERS, actor, Role.SUPER_ADMIN, f"users:{inserted}")
        return inserted

    def rehash_plain_passwords(self) -> int:
        """Hash any password column that still holds plain text."""
        count = 0
        for user in self._users.list_all():
            if looks_hashed(user.password_hash):
                continue
            self._users.set_password_hash(user.user_id, password_hash=generate_password_hash(user.password_hash))
            count += 1
        return count
