from __future__ import annotations

import io

from admission_system.common.csv_source import iter_csv_rows
from admission_system.core.enums import AssignmentOutcome, AuditAction, Role
from admission_system.core.exceptions import StoreError
from admission_system.students.importer import StudentImportService


def _rows(text: str):
    return iter_csv_rows(io.StringIO(text))


def test_import_creates_students_and_assignments(store, importer, audit):
    report = importer.import_students(
        _rows("name,mobile,address,preferred_unit\nAsha,900,Pune,Law\nRavi,901,,\n"),
        actor="root",
    )

    assert report.processed == 2
    assert report.skipped == 0
    assert report.failed == 0
    assert len(store.students) == 2

    asha = next(s for s in store.students.values() if s.mobile == "900")
    ravi = next(s for s in store.students.values() if s.mobile == "901")
    assert store.assignments[asha.student_id].unit == "Law"
    assert store.assignments[asha.student_id].assigned_by == "SYSTEM"
    # No preferred unit: no assignment row, so the student shows as unassigned.
    assert ravi.student_id not in store.assignments

    assert audit.entries[-1] == (AuditAction.CSV_IMPORT_STUDENTS, "root", Role.SUPER_ADMIN, "2 rows")


def test_rows_missing_name_or_mobile_are_skipped(store, importer):
    report = importer.import_students(
        _rows("name,mobile,preferred_unit\n,900,Law\nRavi,,Law\nMeera,902,\n"),
        actor="root",
    )

    assert report.processed == 1
    assert report.skipped == 2
    assert report.errors[0].startswith("line 2:")
    assert report.errors[1].startswith("line 3:")
    assert [s.mobile for s in store.students.values()] == ["902"]


def test_store_failure_keeps_earlier_rows(store, importer):
    store.failing_mobiles.add("901")

    report = importer.import_students(
        _rows("name,mobile,preferred_unit\nAsha,900,Law\nRavi,901,Law\nMeera,902,Law\n"),
        actor="root",
    )

    assert report.processed == 2
    assert report.failed == 1
    assert sorted(s.mobile for s in store.students.values()) == ["900", "902"]
    assert report.to_dict()["count"] == 2


def test_import_does_not_clobber_manual_assignment(store, importer, assignment_service):
    sid = store.add_student("Asha", "900", preferred_unit="Law")
    assignment_service.assign_to_sub_admin(student_id=sid, unit="Engineering", sub_admin="sa1", admin="root")

    importer.import_students(_rows("name,mobile,preferred_unit\nAsha,900,Commerce\n"), actor="root")

    row = store.assignments[sid]
    assert row.unit == "Engineering"
    assert row.teacher == "sa1"
    assert store.students[sid].preferred_unit == "Law"


def test_reimport_is_idempotent(store, importer, assignment_service):
    text = "name,mobile,preferred_unit\nAsha,900,Law\n"
    importer.import_students(_rows(text), actor="root")
    before = (dict(store.students), dict(store.assignments))

    importer.import_students(_rows(text), actor="root")

    assert (dict(store.students), dict(store.assignments)) == before
    sid = next(iter(store.students))
    assert assignment_service.ensure_assignment(student_id=sid, unit="Law") == AssignmentOutcome.UNCHANGED


def test_import_assigns_the_preference_on_file(store, importer, assignment_service):
    sid = store.add_student("Asha", "900", preferred_unit="Law")

    report = importer.import_students(_rows("name,mobile,preferred_unit\nAsha,900,Commerce\n"), actor="root")

    assert report.processed == 1
    assert store.students[sid].preferred_unit == "Law"
    assert store.assignments[sid].unit == "Law"
    assert assignment_service.list_reassignment_queue() == []


def test_reimport_without_unit_assigns_the_preference_on_file(store, importer):
    sid = store.add_student("Asha", "900", preferred_unit="Law")

    importer.import_students(_rows("name,mobile,preferred_unit\nAsha,900,\n"), actor="root")

    assert store.assignments[sid].unit == "Law"


class BrokenAssignments:
    def __init__(self):
        self.calls = []

    def ensure_assignment(self, *, student_id, unit, actor):
        self.calls.append((student_id, unit))
        raise StoreError("Lost connection to MySQL server")


def test_assignment_failure_still_counts_stored_student(store, student_service, audit):
    assignments = BrokenAssignments()
    importer = StudentImportService(student_service, assignments, audit)

    report = importer.import_students(
        _rows("name,mobile,preferred_unit\nAsha,900,Law\nRavi,901,\n"),
        actor="root",
    )

    assert len(store.students) == 2
    assert report.processed == 2
    assert report.failed == 0
    assert report.assignment_failed == 1
    assert len(report.errors) == 1
    assert report.errors[0].startswith("line 2:")
    assert report.to_dict()["count"] == 2
    assert assignments.calls == [(next(iter(store.students)), "Law")]
    assert audit.entries[-1] == (AuditAction.CSV_IMPORT_STUDENTS, "root", Role.SUPER_ADMIN, "2 rows")
