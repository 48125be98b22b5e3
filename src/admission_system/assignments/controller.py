from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import actor_from, int_field, json_body
from ..container import Container
from ..core.constants import SYSTEM_ACTOR
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/unassigned-students", methods=["GET"], endpoint="admin_unassigned")
    def admin_unassigned():
        return jsonify([s.to_dict() for s in container.assignment_service.list_unassigned()])

    @app.route("/admin/reassignment-queue", methods=["GET"], endpoint="admin_reassignment_queue")
    def admin_reassignment_queue():
        return jsonify([c.to_dict() for c in container.assignment_service.list_reassignment_queue()])

    @app.route("/admin/teachers-by-unit/<unit>", methods=["GET"], endpoint="admin_teachers_by_unit")
    def admin_teachers_by_unit(unit: str):
        names = container.user_service.teachers_by_unit(unit)
        return jsonify([{"teacher_name": name} for name in names])

    @app.route("/admin/ensure-assignment", methods=["POST"], endpoint="admin_ensure_assignment")
    def admin_ensure_assignment():
        body = json_body()
        actor = actor_from(body, "admin", "performed_by", default=SYSTEM_ACTOR)
        outcome = container.assignment_service.ensure_assignment(
            student_id=int_field(body, "student_id"),
            unit=body.get("unit"),
            actor=actor,
            actor_role=Role.SYSTEM if actor == SYSTEM_ACTOR else Role.SUPER_ADMIN,
        )
        return jsonify({"success": True, "outcome": outcome.value})

    @app.route("/admin/assign-sub-admin", methods=["POST"], endpoint="admin_assign_sub_admin")
    def admin_assign_sub_admin():
        body = json_body()
        assignment = container.assignment_service.assign_to_sub_admin(
            student_id=int_field(body, "student_id"),
            unit=body.get("unit") or "",
            sub_admin=body.get("sub_admin") or "",
            admin=body.get("admin") or "",
        )
        return jsonify({"success": True, "assignment": assignment.to_dict() if assignment else None})

    @app.route("/admin/reassign-student", methods=["PUT"], endpoint="admin_reassign_student")
    def admin_reassign_student():
        body = json_body()
        container.assignment_service.reassign(
            student_id=int_field(body, "student_id"),
            new_unit=body.get("new_unit") or "",
            new_teacher=body.get("new_teacher"),
            admin=actor_from(body, "admin", default="SUPER_ADMIN"),
        )
        return jsonify({"success": True})

    @app.route("/students/<int:student_id>/assignment", methods=["GET"], endpoint="student_assignment")
    def student_assignment(student_id: int):
        queue = container.assignment_service.classify(student_id)
        assignment = container.assignment_service.get_for_student(student_id)
        return jsonify(
            {
                "student_id": student_id,
                "queue": queue.value,
                "assignment": assignment.to_dict() if assignment else None,
            }
        )
