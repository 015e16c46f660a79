from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body, optional_datetime
from ..container import Container
from .model import AwardUnlock


def register(app: Flask, container: Container) -> None:
    awards = container.awards_service

    def _award_row(a: AwardUnlock) -> dict:
        return {**a.to_dict(), "name": awards.award_name(a), "periodLabel": awards.describe_period(a)}

    @app.route("/api/awards/definitions", methods=["GET"], endpoint="award_definitions")
    def award_definitions():
        return jsonify([
            {"id": d.id.value, "name": d.name, "description": d.description, "category": d.category.value}
            for d in awards.definitions()
        ])

    @app.route("/api/awards", methods=["GET"], endpoint="list_awards")
    def list_awards():
        if request.args.get("studentId"):
            rows = awards.for_student(request.args["studentId"])
        elif request.args.get("classId"):
            rows = awards.for_class(request.args["classId"])
        elif request.args.get("periodKey"):
            rows = awards.for_period(request.args["periodKey"])
        else:
            rows = awards.list_active()
        return jsonify([_award_row(a) for a in rows])

    @app.route("/api/classes/<class_id>/awards/<award_id>/candidates", methods=["GET"], endpoint="award_candidates")
    def award_candidates(class_id: str, award_id: str):
        ranked, period = awards.candidates(
            award_id,
            class_id,
            start=optional_datetime(request.args.get("from"), "from"),
            end=optional_datetime(request.args.get("to"), "to", inclusive_end=True),
        )
        meta = awards.awards_meta(class_id)
        return jsonify({
            "periodType": period.kind.value,
            "periodKey": period.key,
            "periodLabel": period.describe(),
            "candidates": [c.to_dict() for c in ranked],
            "meta": meta.to_dict(),
        })

    @app.route("/api/classes/<class_id>/awards/<award_id>", methods=["POST"], endpoint="give_award")
    def give_award(class_id: str, award_id: str):
        data = json_body()
        unlock = awards.award(
            award_id,
            class_id,
            data.get("studentId") or None,
            start=optional_datetime(data.get("from"), "from"),
            end=optional_datetime(data.get("to"), "to", inclusive_end=True),
        )
        if unlock is None:
            return jsonify({"created": False, "award": None})
        return jsonify({"created": True, "award": _award_row(unlock)}), 201

    @app.route("/api/awards/run", methods=["POST"], endpoint="run_awards")
    def run_awards():
        created = awards.run_periodic_awards()
        return jsonify([_award_row(a) for a in created])
