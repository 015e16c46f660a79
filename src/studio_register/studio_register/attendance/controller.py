from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import optional_datetime
from ..container import Container


def register(app: Flask, container: Container) -> None:
    reports = container.attendance_service

    @app.route("/api/reports/dashboard", methods=["GET"], endpoint="dashboard")
    def dashboard():
        return jsonify(reports.dashboard())

    @app.route("/api/classes/<class_id>/attendance", methods=["GET"], endpoint="class_attendance")
    def class_attendance(class_id: str):
        rows = reports.leaderboard(
            class_id,
            optional_datetime(request.args.get("from"), "from"),
            optional_datetime(request.args.get("to"), "to", inclusive_end=True),
        )
        return jsonify([r.to_dict() for r in rows])

    @app.route("/api/students/<student_id>/stats", methods=["GET"], endpoint="student_stats")
    def student_stats(student_id: str):
        stats = reports.student_stats(
            student_id,
            optional_datetime(request.args.get("from"), "from"),
            optional_datetime(request.args.get("to"), "to", inclusive_end=True),
        )
        return jsonify(stats.to_dict())

    @app.route("/api/students/<student_id>/profile", methods=["GET"], endpoint="student_profile")
    def student_profile(student_id: str):
        profile = reports.student_profile(student_id)
        profile["awards"] = [a.to_dict() for a in container.awards_service.for_student(student_id)]
        return jsonify(profile)
