from __future__ import annotations

import asyncio
import logging

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError
from ..progress.summary import summarize_session
from .payload import parse_mark_request

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sessions/<session_id>/attendance", methods=["POST"], endpoint="mark_attendance")
    def mark_attendance(session_id: str):
        """Mark a batch of participants and notify the ones whose outcome is new or changed."""
        try:
            mark_request = parse_mark_request(request.get_json(silent=True) or {}, session_id=session_id)
            report = asyncio.run(container.attendance_service.mark_attendance(mark_request))
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except NotFoundError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        except Exception:
            logger.exception("attendance batch failed for session %s", session_id)
            return jsonify({"success": False, "message": "Error marking attendance"}), 500
        return jsonify(report.to_dict()), 200

    @app.route("/api/sessions/<session_id>/attendance", methods=["GET"], endpoint="session_attendance")
    def session_attendance(session_id: str):
        try:
            session = asyncio.run(container.attendance_service.get_session(session_id))
        except NotFoundError as e:
            return jsonify({"success": False, "message": str(e)}), 404

        participants = [
            {
                "participantId": p.participant_id,
                "userId": p.user_id,
                "state": p.state.value,
                "markedAt": p.marked_at.isoformat() if p.marked_at else None,
                "rating": p.rating,
                "notes": p.notes,
            }
            for p in session.participants
        ]
        return jsonify(
            {
                "success": True,
                "data": participants,
                "summary": summarize_session(session).to_dict(),
            }
        ), 200
