from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import actor_from, bool_field, json_body, uploaded_rows
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        user = container.auth_service.authenticate(body.get("username") or "", body.get("password") or "")
        return jsonify(user.to_dict())

    @app.route("/login-check", methods=["GET"], endpoint="login_check")
    def login_check():
        # Clients poll this to log out accounts disabled mid-session.
        if not container.auth_service.is_active(request.headers.get("X-Username")):
            return "", 403
        return "", 200

    @app.route("/users", methods=["GET"], endpoint="users_list")
    def users_list():
        return jsonify([u.to_public_dict() for u in container.user_service.list_users()])

    @app.route("/users/<int:user_id>/status", methods=["PUT"], endpoint="users_status")
    def users_status(user_id: int):
        body = json_body()
        container.user_service.set_active(
            user_id=user_id,
            is_active=bool_field(body, "is_active"),
            actor=actor_from(body, "admin", "performed_by", default="SUPER_ADMIN"),
        )
        return jsonify({"success": True})

    @app.route("/users/<int:user_id>/reset-password", methods=["PUT"], endpoint="users_reset_password")
    def users_reset_password(user_id: int):
        body = json_body()
        container.user_service.reset_password(
            user_id=user_id,
            new_password=body.get("newPassword") or body.get("new_password") or "",
            actor=actor_from(body, "admin", "performed_by", default="SUPER_ADMIN"),
        )
        return jsonify({"success": True})

    @app.route("/users/import", methods=["POST"], endpoint="users_import")
    def users_import():
        actor = actor_from(request.form, "admin", "performed_by", default="SUPER_ADMIN")
        inserted = container.user_service.import_users(uploaded_rows(), actor=actor)
        return jsonify({"success": True, "message": "Users imported successfully", "inserted": inserted})
