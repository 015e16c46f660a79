from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body, optional_datetime
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    students = container.student_service

    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    def list_students():
        class_id = request.args.get("classId") or None
        if request.args.get("archived") == "1":
            rows = students.list_archived(class_id)
        else:
            rows = students.list_active(class_id)
        return jsonify([s.to_dict() for s in rows])

    @app.route("/api/students", methods=["POST"], endpoint="enroll_student")
    def enroll_student():
        data = json_body()
        student = students.enroll(
            str(data.get("name") or ""),
            str(data.get("classId") or ""),
            joined_at=optional_datetime(data.get("joinedAtISO"), "joinedAtISO"),
        )
        return jsonify(student.to_dict()), 201

    @app.route("/api/students/<student_id>", methods=["PATCH"], endpoint="rename_student")
    def rename_student(student_id: str):
        data = json_body()
        if "name" not in data:
            raise ValidationError("Name is required")
        return jsonify(students.rename(student_id, str(data.get("name") or "")).to_dict())

    @app.route("/api/students/<student_id>/archive", methods=["POST"], endpoint="archive_student")
    def archive_student(student_id: str):
        return jsonify(students.archive(student_id).to_dict())

    @app.route("/api/students/<student_id>/unarchive", methods=["POST"], endpoint="unarchive_student")
    def unarchive_student(student_id: str):
        return jsonify(students.unarchive(student_id).to_dict())

    @app.route("/api/students/<student_id>/move", methods=["POST"], endpoint="move_student")
    def move_student(student_id: str):
        data = json_body()
        return jsonify(students.move(student_id, str(data.get("classId") or "")).to_dict())

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="delete_student")
    def delete_student(student_id: str):
        students.delete(student_id)
        return jsonify({"success": True})
