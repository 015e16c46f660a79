from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import to_iso
from ..common.http import json_body
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    sync = container.sync_manager

    def _status() -> dict:
        return {
            "online": sync.is_online,
            "syncInProgress": sync.sync_in_progress,
            "lastSyncISO": to_iso(sync.last_sync_time()),
        }

    @app.route("/api/sync/status", methods=["GET"], endpoint="sync_status")
    def sync_status():
        return jsonify(_status())

    @app.route("/api/sync", methods=["POST"], endpoint="run_sync")
    def run_sync():
        ok = sync.full_sync()
        return jsonify({"success": ok, **_status()})

    @app.route("/api/sync/online", methods=["POST"], endpoint="set_online")
    def set_online():
        data = json_body()
        if not isinstance(data.get("online"), bool):
            raise ValidationError("online must be true or false")
        sync.set_online(data["online"])
        return jsonify(_status())
