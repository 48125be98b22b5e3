from __future__ import annotations

import pytest

from admission_system.core.enums import AuditAction, Role
from admission_system.core.exceptions import NotFoundError, ValidationError


def test_record_call_moves_status(store, call_service, audit):
    sid = store.add_student("Asha", "900")

    outcome = call_service.record_call(student_id=sid, teacher="t1", unit="Law", call_status="Called", remarks="busy")

    assert outcome.status == "Called"
    assert not outcome.kept_completed
    assert store.students[sid].status == "Called"
    assert store.calls[-1].remarks == "busy"
    assert audit.entries == [(AuditAction.CALL_UPDATE, "t1", Role.TEACHER, f"student_id:{sid}")]


def test_completed_is_sticky(store, call_service):
    sid = store.add_student("Asha", "900")

    call_service.record_call(student_id=sid, teacher="t1", unit="Law", call_status="Completed")
    outcome = call_service.record_call(student_id=sid, teacher="t2", unit="Law", call_status="Called")

    assert outcome.kept_completed
    assert store.students[sid].status == "Completed"
    assert [c.call_status for c in store.calls] == ["Completed", "Completed"]
    assert len(store.calls) == 2


def test_address_only_replaced_when_given(store, call_service):
    sid = store.add_student("Asha", "900", address="Pune")

    call_service.record_call(student_id=sid, teacher="t1", unit="Law", call_status="Called")
    assert store.students[sid].address == "Pune"

    call_service.record_call(student_id=sid, teacher="t1", unit="Law", call_status="Called", address="Mumbai")
    assert store.students[sid].address == "Mumbai"


def test_empty_call_status_rejected(store, call_service):
    sid = store.add_student("Asha", "900")

    with pytest.raises(ValidationError):
        call_service.record_call(student_id=sid, teacher="t1", unit="Law", call_status=" ")
    assert store.calls == []


def test_unknown_student_leaves_no_log(store, call_service, audit):
    with pytest.raises(NotFoundError):
        call_service.record_call(student_id=77, teacher="t1", unit="Law", call_status="Called")
    assert store.calls == []
    assert audit.entries == []


def test_history_newest_first(store, call_service):
    sid = store.add_student("Asha", "900")
    for status in ("No Answer", "Called", "Completed"):
        call_service.record_call(student_id=sid, teacher="t1", unit="Law", call_status=status)

    history = call_service.history(sid, limit=2)

    assert [c.call_status for c in history] == ["Completed", "Called"]


def test_history_unknown_student(call_service):
    with pytest.raises(NotFoundError):
        call_service.history(5)
