from __future__ import annotations

import asyncio

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_list, require_non_empty
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError


def register(app: Flask, container: Container) -> None:
    def _session_ids(body: dict) -> list[str]:
        raw = require_list(body.get("sessionIds"), "sessionIds")
        return [require_non_empty(sid, f"sessionIds[{i}]") for i, sid in enumerate(raw)]

    @app.route("/api/progress/<user_id>", methods=["POST"], endpoint="user_progress")
    def user_progress(user_id: str):
        body = request.get_json(silent=True) or {}
        try:
            summary = asyncio.run(container.progress_service.user_progress(user_id, _session_ids(body)))
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except NotFoundError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        return jsonify({"success": True, "data": summary.to_dict()}), 200

    @app.route("/api/progress/<user_id>/history", methods=["POST"], endpoint="user_history")
    def user_history(user_id: str):
        body = request.get_json(silent=True) or {}
        try:
            now = container.clock.now()
            today = parse_iso_date(body["today"]) if body.get("today") else now.date()
            rows = asyncio.run(
                container.progress_service.user_history(user_id, _session_ids(body), today=today, now=now)
            )
        except (TypeError, ValueError):
            return jsonify({"success": False, "message": "today must be YYYY-MM-DD"}), 400
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except NotFoundError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        return jsonify({"success": True, "data": rows}), 200
