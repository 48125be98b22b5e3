from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import actor_from, int_field, json_body, role_field, uploaded_rows
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/students/import", methods=["POST"], endpoint="students_import")
    def students_import():
        form = request.form
        report = container.student_import_service.import_students(
            uploaded_rows(),
            actor=actor_from(form, "admin", "performed_by", default="SUPER_ADMIN"),
            actor_role=role_field(form, "role", Role.SUPER_ADMIN),
        )
        return jsonify(report.to_dict())

    @app.route("/teacher/students", methods=["GET"], endpoint="teacher_students")
    def teacher_students():
        students = container.student_service.list_for_teacher(request.args.get("teacher") or "")
        return jsonify([s.to_dict() for s in students])

    @app.route("/student/preferred-unit", methods=["PUT"], endpoint="student_preferred_unit")
    def student_preferred_unit():
        body = json_body()
        container.student_service.record_preference(
            student_id=int_field(body, "student_id"),
            preferred_unit=body.get("preferred_unit"),
            actor=actor_from(body, "teacher", "performed_by"),
            actor_role=role_field(body, "role", Role.TEACHER),
        )
        return jsonify({"success": True})

    @app.route("/students/<int:student_id>", methods=["GET"], endpoint="student_detail")
    def student_detail(student_id: int):
        return jsonify(container.student_service.get(student_id).to_dict())
