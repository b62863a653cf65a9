from __future__ import annotations

import pytest

from src.session_attendance.session_attendance.attendance.payload import parse_mark_request
from src.session_attendance.session_attendance.core.exceptions import ValidationError


def _body(**overrides):
    body = {
        "sessionId": "s1",
        "actor": "coach-1",
        "attendanceEntries": [
            {"participantId": "p1", "attended": True, "rating": 5, "notes": " great focus "},
            {"participantId": "p2", "attended": False},
        ],
    }
    body.update(overrides)
    return body


def test_parse_valid_request():
    req = parse_mark_request(_body())

    assert req.session_id == "s1"
    assert req.actor == "coach-1"
    assert [(e.participant_id, e.attended) for e in req.entries] == [("p1", True), ("p2", False)]
    assert req.entries[0].rating == 5
    assert req.entries[0].notes == "great focus"
    assert req.entries[1].rating is None


def test_path_session_id_wins():
    req = parse_mark_request(_body(sessionId="other"), session_id="s1")

    assert req.session_id == "s1"


@pytest.mark.parametrize(
    "overrides",
    [
        {"sessionId": ""},
        {"sessionId": None},
        {"actor": None},
        {"attendanceEntries": None},
        {"attendanceEntries": []},
        {"attendanceEntries": "p1"},
        {"attendanceEntries": [{"participantId": "p1", "attended": "true"}]},
        {"attendanceEntries": [{"participantId": "p1", "attended": 1}]},
        {"attendanceEntries": [{"participantId": "", "attended": True}]},
        {"attendanceEntries": [{"participantId": "p1", "attended": True, "rating": 6}]},
        {"attendanceEntries": [{"participantId": "p1", "attended": True, "rating": True}]},
        {"attendanceEntries": ["p1"]},
    ],
)
def test_malformed_requests_are_rejected(overrides):
    with pytest.raises(ValidationError):
        parse_mark_request(_body(**overrides))


def test_body_must_be_an_object():
    with pytest.raises(ValidationError):
        parse_mark_request(["not", "a", "dict"])
