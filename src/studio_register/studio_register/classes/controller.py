from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    classes = container.class_service

    @app.route("/api/classes", methods=["GET"], endpoint="list_classes")
    def list_classes():
        return jsonify([c.to_dict() for c in classes.list_active()])

    @app.route("/api/classes", methods=["POST"], endpoint="create_class")
    def create_class():
        data = json_body()
        cls = classes.create(str(data.get("name") or ""), data.get("color") or None)
        return jsonify(cls.to_dict()), 201

    @app.route("/api/classes/<class_id>", methods=["PATCH"], endpoint="update_class")
    def update_class(class_id: str):
        data = json_body()
        cls = classes.get(class_id)
        if "name" in data:
            cls = classes.rename(class_id, str(data.get("name") or ""))
        if "color" in data:
            cls = classes.recolor(class_id, str(data.get("color") or ""))
        return jsonify(cls.to_dict())

    @app.route("/api/classes/<class_id>", methods=["DELETE"], endpoint="delete_class")
    def delete_class(class_id: str):
        classes.delete(class_id)
        return jsonify({"success": True})
