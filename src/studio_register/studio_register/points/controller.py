from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body
from ..container import Container
from ..core.constants import POINT_PRESETS
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    points = container.points_service

    @app.route("/api/points", methods=["GET"], endpoint="list_points")
    def list_points():
        student_id = request.args.get("studentId")
        if not student_id:
            raise ValidationError("studentId is required")
        return jsonify({
            "total": points.total(student_id),
            "byReason": points.breakdown_by_reason(student_id),
            "events": [p.to_dict() for p in points.list_for_student(student_id)],
        })

    @app.route("/api/points/presets", methods=["GET"], endpoint="point_presets")
    def point_presets():
        return jsonify([{"id": pid, "label": label, "points": value} for pid, label, value in POINT_PRESETS])

    @app.route("/api/points", methods=["POST"], endpoint="grant_points")
    def grant_points():
        data = json_body()
        student_id = str(data.get("studentId") or "")
        class_id = str(data.get("classId") or "")
        if data.get("presetId"):
            event = points.grant_preset(str(data["presetId"]), student_id, class_id)
        else:
            event = points.grant(student_id, class_id, str(data.get("reason") or ""), data.get("points"))
        return jsonify(event.to_dict()), 201

    @app.route("/api/points/<point_id>", methods=["DELETE"], endpoint="revoke_points")
    def revoke_points(point_id: str):
        points.revoke(point_id)
        return jsonify({"success": True})
