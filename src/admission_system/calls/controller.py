from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import int_field, json_body
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/call-update", methods=["POST"], endpoint="call_update")
    def call_update():
        body = json_body()
        outcome = container.call_service.record_call(
            student_id=int_field(body, "student_id"),
            teacher=body.get("teacher"),
            unit=body.get("unit"),
            call_status=body.get("call_status") or "",
            remarks=body.get("remarks"),
            address=body.get("address"),
        )
        return jsonify({"success": True, **outcome.to_dict()})

    @app.route("/students/<int:student_id>/calls", methods=["GET"], endpoint="student_calls")
    def student_calls(student_id: int):
        limit = request.args.get("limit", type=int) or DEFAULT_HISTORY_LIMIT
        if limit < 1:
            raise ValidationError("limit must be positive")
        return jsonify([c.to_dict() for c in container.call_service.history(student_id, limit=limit)])
