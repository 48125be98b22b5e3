from __future__ import annotations

from flask import Flask, jsonify

from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/", methods=["GET"], endpoint="health")
    def health():
        return "Admission Management Backend is running"

    @app.route("/dashboard-summary", methods=["GET"], endpoint="dashboard_summary")
    def dashboard_summary():
        return jsonify(container.dashboard_service.summary().to_dict())

    @app.route("/teacher/performance/<teacher>", methods=["GET"], endpoint="teacher_performance")
    def teacher_performance(teacher: str):
        return jsonify(container.dashboard_service.teacher_performance(teacher).to_dict())
