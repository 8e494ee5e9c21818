from __future__ import annotations

import threading

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import ConfigurationError


def register(app: Flask, container: Container) -> None:
    engine = container.engine
    # Flask serves requests on worker threads; the engine itself is single-threaded.
    lock = threading.Lock()

    def _bad_request(message: str):
        return jsonify({"success": False, "message": message}), 400

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_state")
    def attendance_state():
        with lock:
            state = engine.state
        return jsonify(state.to_dict())

    @app.route("/api/attendance/selection", methods=["POST"], endpoint="attendance_select")
    def attendance_select():
        data = request.get_json(silent=True)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return _bad_request("Body must be a JSON object")

        try:
            with lock:
                state = engine.select(group=data.get("group"), day=data.get("date"), mode=data.get("mode"))
        except ConfigurationError as e:
            return _bad_request(str(e))
        return jsonify(state.to_dict())

    @app.route("/api/attendance/retry", methods=["POST"], endpoint="attendance_retry")
    def attendance_retry():
        with lock:
            state = engine.retry()
        return jsonify(state.to_dict())
