from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    registers = container.register_service

    @app.route("/api/classes/<class_id>/sessions", methods=["GET"], endpoint="list_sessions")
    def list_sessions(class_id: str):
        return jsonify([s.to_dict() for s in registers.list_for_class(class_id)])

    @app.route("/api/classes/<class_id>/register", methods=["POST"], endpoint="open_register")
    def open_register(class_id: str):
        session = registers.open_session(class_id)
        session = registers.add_missing_marks(session.id)
        return jsonify(session.to_dict())

    @app.route("/api/sessions/<session_id>/marks", methods=["POST"], endpoint="set_mark")
    def set_mark(session_id: str):
        data = json_body()
        student_id = str(data.get("studentId") or "")
        if not student_id:
            raise ValidationError("studentId is required")
        if data.get("cycle"):
            session = registers.cycle_mark(session_id, student_id)
        else:
            session = registers.set_mark(session_id, student_id, str(data.get("mark") or ""))
        return jsonify(session.to_dict())

    @app.route("/api/sessions/<session_id>/close", methods=["POST"], endpoint="close_register")
    def close_register(session_id: str):
        session, awards = registers.close_session(session_id)
        return jsonify({"session": session.to_dict(), "awards": [a.to_dict() for a in awards]})

    @app.route("/api/sessions/<session_id>/random", methods=["POST"], endpoint="pick_random")
    def pick_random(session_id: str):
        return jsonify(registers.pick_random_attendee(session_id).to_dict())

    @app.route("/api/sessions/<session_id>", methods=["DELETE"], endpoint="delete_register")
    def delete_register(session_id: str):
        registers.delete_session(session_id)
        return jsonify({"success": True})
