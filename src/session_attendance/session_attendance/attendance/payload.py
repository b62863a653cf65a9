"""Request payload adapter.

Translates the JSON body of a batch request into a ``MarkRequest``. Shape checks
live here; business outcomes do not. Any problem raises ValidationError before a
single state is written.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..common.validators import (
    optional_int_in_range,
    optional_str,
    require_bool,
    require_list,
    require_non_empty,
)
from ..core.constants import MAX_RATING, MIN_RATING
from ..core.exceptions import ValidationError
from .model import AttendanceEntry, MarkRequest


def parse_mark_request(payload: Mapping[str, Any], *, session_id: Optional[str] = None) -> MarkRequest:
    """Build a MarkRequest from ``{sessionId, attendanceEntries, actor}``.

    ``session_id`` (e.g. from the URL) takes precedence over the body field.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("request body must be a JSON object")

    sid = require_non_empty(session_id if session_id is not None else payload.get("sessionId"), "sessionId")
    raw_entries = require_list(payload.get("attendanceEntries"), "attendanceEntries")
    if not raw_entries:
        raise ValidationError("attendanceEntries must not be empty")
    actor = require_non_empty(payload.get("actor"), "actor")

    entries = tuple(_parse_entry(raw, idx) for idx, raw in enumerate(raw_entries))
    return MarkRequest(session_id=sid, entries=entries, actor=actor)


def _parse_entry(raw: Any, idx: int) -> AttendanceEntry:
    if not isinstance(raw, Mapping):
        raise ValidationError(f"attendanceEntries[{idx}] must be an object")
    prefix = f"attendanceEntries[{idx}]"
    return AttendanceEntry(
        participant_id=require_non_empty(raw.get("participantId"), f"{prefix}.participantId"),
        attended=require_bool(raw.get("attended"), f"{prefix}.attended"),
        rating=optional_int_in_range(raw.get("rating"), f"{prefix}.rating", MIN_RATING, MAX_RATING),
        notes=optional_str(raw.get("notes"), f"{prefix}.notes"),
    )
