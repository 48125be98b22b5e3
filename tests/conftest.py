from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from admission_system.assignments.model import Assignment, ReassignmentCandidate, UnassignedStudent
from admission_system.assignments.service import AssignmentService
from admission_system.calls.model import CallLog
from admission_system.calls.service import CallService
from admission_system.container import wire
from admission_system.core.constants import STATUS_COMPLETED, STATUS_NEW
from admission_system.core.enums import Role
from admission_system.core.exceptions import StoreError
from admission_system.dashboard.model import GroupCount
from admission_system.students.importer import StudentImportService
from admission_system.students.model import Student
from admission_system.students.service import StudentService
from admission_system.users.model import User
from admission_system.users.service import AuthService, UserService


@dataclass
class InMemoryStore:
    """Tables shared by the fake repositories."""

    students: dict[int, Student] = field(default_factory=dict)
    assignments: dict[int, Assignment] = field(default_factory=dict)
    calls: list[CallLog] = field(default_factory=list)
    next_id: int = 1
    # Mobiles whose insert fails like a broken connection would.
    failing_mobiles: set[str] = field(default_factory=set)

    def new_id(self) -> int:
        value = self.next_id
        self.next_id += 1
        return value

    def add_student(
        self,
        name: str,
        mobile: str,
        *,
        preferred_unit: Optional[str] = None,
        status: str = STATUS_NEW,
        address: Optional[str] = None,
    ) -> int:
        sid = self.new_id()
        self.students[sid] = Student(
            student_id=sid,
            name=name,
            mobile=mobile,
            address=address,
            preferred_unit=preferred_unit,
            status=status,
        )
        return sid

    def put_assignment(
        self,
        student_id: int,
        *,
        unit: Optional[str],
        teacher: Optional[str] = None,
        assigned_to_role: Optional[Role] = Role.SUPER_ADMIN,
    ) -> None:
        self.assignments[student_id] = Assignment(
            assignment_id=self.new_id(),
            student_id=student_id,
            unit=unit,
            teacher=teacher,
            assigned_to_role=assigned_to_role,
        )


def _unassigned_row(a: Optional[Assignment]) -> bool:
    # Mirrors the WHERE clause of the MySQL query.
    return a is None or a.assigned_to_role is None or (a.assigned_to_role == Role.SUB_ADMIN and a.teacher is None)


class InMemoryStudents:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, student_id, *, for_update=False):
        return self._store.students.get(int(student_id))

    def get_by_mobile(self, mobile, *, for_update=False):
        for s in self._store.students.values():
            if s.mobile == mobile:
                return s
        return None

    def create(self, *, name, mobile, address, preferred_unit):
        if mobile in self._store.failing_mobiles:
            raise StoreError(f"insert failed for {mobile}")
        return self._store.add_student(name, mobile, address=address, preferred_unit=preferred_unit)

    def set_preferred_unit(self, *, student_id, preferred_unit):
        s = self._store.students.get(student_id)
        if s is None:
            return False
        self._store.students[student_id] = replace(s, preferred_unit=preferred_unit)
        return True

    def fill_preferred_unit(self, *, student_id, preferred_unit):
        s = self._store.students.get(student_id)
        if s is None or (s.preferred_unit or "").strip():
            return False
        self._store.students[student_id] = replace(s, preferred_unit=preferred_unit)
        return True

    def update_status(self, *, student_id, status, address=None):
        s = self._store.students.get(student_id)
        if s is None:
            return False
        self._store.students[student_id] = replace(s, status=status, address=address if address is not None else s.address)
        return True

    def list_for_teacher(self, teacher):
        ids = [sid for sid, a in self._store.assignments.items() if a.teacher == teacher]
        return [self._store.students[sid] for sid in sorted(ids)]


class InMemoryAssignments:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_for_student(self, student_id, *, for_update=False):
        return self._store.assignments.get(int(student_id))

    def _apply(self, current: Assignment, write) -> Assignment:
        return replace(
            current,
            unit=write.unit,
            teacher=write.teacher,
            assigned_to_role=write.assigned_to_role,
            assigned_by=write.assigned_by,
            assigned_by_role=write.assigned_by_role,
        )

    def create(self, *, student_id, write):
        if student_id in self._store.assignments:
            raise StoreError(f"Duplicate assignment for student {student_id}")
        aid = self._store.new_id()
        blank = Assignment(assignment_id=aid, student_id=student_id, unit=None, teacher=None, assigned_to_role=None)
        self._store.assignments[student_id] = self._apply(blank, write)
        return aid

    def repair(self, *, student_id, write):
        current = self._store.assignments.get(student_id)
        if current is None or current.has_unit:
            return False
        self._store.assignments[student_id] = self._apply(current, write)
        return True

    def overwrite(self, *, student_id, write):
        current = self._store.assignments.get(student_id)
        if current is None:
            return self.create(student_id=student_id, write=write)
        self._store.assignments[student_id] = self._apply(current, write)
        return current.assignment_id

    def update_unit_and_teacher(self, *, student_id, unit, teacher):
        current = self._store.assignments.get(student_id)
        if current is None:
            return False
        self._store.assignments[student_id] = replace(current, unit=unit, teacher=teacher)
        return True

    def list_unassigned(self):
        out = []
        for sid in sorted(self._store.students):
            s = self._store.students[sid]
            a = self._store.assignments.get(sid)
            if _unassigned_row(a):
                out.append(
                    UnassignedStudent(
                        student_id=sid,
                        name=s.name,
                        mobile=s.mobile,
                        preferred_unit=s.preferred_unit,
                        status=s.status,
                        unit=a.unit if a else None,
                        teacher=a.teacher if a else None,
                        assigned_to_role=a.assigned_to_role.value if a and a.assigned_to_role else None,
                    )
                )
        return out

    def list_reassignment_queue(self):
        out = []
        for sid in sorted(self._store.assignments):
            a = self._store.assignments[sid]
            s = self._store.students[sid]
            if s.preferred_unit is None or a.unit is None or s.preferred_unit == a.unit:
                continue
            if _unassigned_row(a):
                continue
            out.append(
                ReassignmentCandidate(
                    student_id=sid,
                    name=s.name,
                    mobile=s.mobile,
                    preferred_unit=s.preferred_unit,
                    assigned_unit=a.unit,
                    teacher=a.teacher,
                )
            )
        return out


class InMemoryCallLogs:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def append(self, *, student_id, teacher, unit, call_status, remarks=None):
        cid = self._store.new_id()
        called_at = datetime(2026, 1, 1, 9, 0, 0) + timedelta(minutes=len(self._store.calls))
        self._store.calls.append(
            CallLog(
                call_id=cid,
                student_id=student_id,
                teacher=teacher,
                unit=unit,
                call_status=call_status,
                remarks=remarks,
                called_at=called_at,
            )
        )
        return cid

    def list_for_student(self, student_id, *, limit):
        items = [c for c in self._store.calls if c.student_id == student_id]
        items.sort(key=lambda c: c.called_at, reverse=True)
        return items[:limit]


@dataclass(frozen=True)
class InMemoryTransaction:
    students: InMemoryStudents
    assignments: InMemoryAssignments
    call_logs: InMemoryCallLogs


class InMemoryUnitOfWork:
    """Snapshot on begin, restore on error: same all-or-nothing contract as MySQL."""

    def __init__(self, store: InMemoryStore):
        self.store = store
        self.begun = 0

    @contextmanager
    def begin(self):
        self.begun += 1
        snapshot = copy.deepcopy(
            (self.store.students, self.store.assignments, self.store.calls, self.store.next_id)
        )
        try:
            yield InMemoryTransaction(
                students=InMemoryStudents(self.store),
                assignments=InMemoryAssignments(self.store),
                call_logs=InMemoryCallLogs(self.store),
            )
        except Exception:
            (
                self.store.students,
                self.store.assignments,
                self.store.calls,
                self.store.next_id,
            ) = snapshot
            raise


class RecordingAuditSink:
    def __init__(self):
        self.entries: list[tuple] = []

    def record(self, action, performed_by, role, target=None):
        self.entries.append((action, performed_by, role, target))

    def actions(self):
        return [e[0] for e in self.entries]


class InMemoryUsers:
    def __init__(self):
        self.users: dict[int, User] = {}
        self._id = 0
        # Usernames whose insert fails like a too-long column would.
        self.failing_usernames: set[str] = set()

    def add(self, username, password, role=Role.TEACHER, *, teacher_name=None, unit=None, is_active=True, hashed=True):
        self._id += 1
        self.users[self._id] = User(
            user_id=self._id,
            username=username,
            password_hash=generate_password_hash(password) if hashed else password,
            role=role,
            teacher_name=teacher_name,
            unit=unit,
            is_active=is_active,
        )
        return self._id

    def get_by_username(self, username):
        for u in self.users.values():
            if u.username == username:
                return u
        return None

    def create_if_absent(self, *, username, password_hash, role, teacher_name, unit):
        if username in self.failing_usernames:
            raise StoreError(f"insert failed for {username}")
        if self.get_by_username(username):
            return False
        self._id += 1
        self.users[self._id] = User(
            user_id=self._id,
            username=username,
            password_hash=password_hash,
            role=role,
            teacher_name=teacher_name,
            unit=unit,
        )
        return True

    def list_all(self):
        return [self.users[k] for k in sorted(self.users)]

    def set_active(self, user_id, *, is_active):
        u = self.users.get(int(user_id))
        if u is None:
            return False
        self.users[u.user_id] = replace(u, is_active=is_active)
        return True

    def set_password_hash(self, user_id, *, password_hash):
        u = self.users.get(int(user_id))
        if u is None:
            return False
        self.users[u.user_id] = replace(u, password_hash=password_hash)
        return True

    def list_active_teacher_names(self, unit):
        return sorted(
            u.teacher_name
            for u in self.users.values()
            if u.role == Role.TEACHER and u.unit == unit and u.is_active and u.teacher_name
        )


class InMemoryDashboard:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def count_students(self):
        total = len(self._store.students)
        completed = sum(1 for s in self._store.students.values() if s.status == STATUS_COMPLETED)
        return total, completed

    def _grouped(self, attr):
        groups: dict = {}
        for sid, a in self._store.assignments.items():
            key = getattr(a, attr)
            assigned, completed = groups.get(key, (0, 0))
            done = self._store.students[sid].status == STATUS_COMPLETED
            groups[key] = (assigned + 1, completed + (1 if done else 0))
        return [GroupCount(key=k, assigned=v[0], completed=v[1]) for k, v in sorted(groups.items(), key=lambda kv: str(kv[0]))]

    def summary_by_unit(self):
        return self._grouped("unit")

    def summary_by_teacher(self):
        return self._grouped("teacher")

    def teacher_call_counts(self, teacher):
        mine = [c for c in self._store.calls if c.teacher == teacher]
        called = {c.student_id for c in mine}
        completed = {c.student_id for c in mine if c.call_status == STATUS_COMPLETED}
        return len(called), len(completed)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def uow(store):
    return InMemoryUnitOfWork(store)


@pytest.fixture
def audit():
    return RecordingAuditSink()


@pytest.fixture
def users_repo():
    return InMemoryUsers()


@pytest.fixture
def student_service(uow, audit):
    return StudentService(uow, audit)


@pytest.fixture
def assignment_service(uow, audit):
    return AssignmentService(uow, audit)


@pytest.fixture
def call_service(uow, audit):
    return CallService(uow, audit)


@pytest.fixture
def importer(student_service, assignment_service, audit):
    return StudentImportService(student_service, assignment_service, audit)


@pytest.fixture
def auth_service(users_repo):
    return AuthService(users_repo)


@pytest.fixture
def user_service(users_repo, audit):
    return UserService(users_repo, audit)


@pytest.fixture
def dashboard_repo(store):
    return InMemoryDashboard(store)


@pytest.fixture
def container(uow, audit, users_repo, dashboard_repo):
    return wire(uow=uow, audit=audit, users_repo=users_repo, dashboard_repo=dashboard_repo)


@pytest.fixture
def client(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from admission_system.main import create_app

    app = create_app(container=container)
    return app.test_client()
