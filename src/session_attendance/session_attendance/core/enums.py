from __future__ import annotations

from enum import Enum


class AttendanceState(str, Enum):
    """Per-participant attendance state stored with the session."""

    UNMARKED = "UNMARKED"
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"


class SkipReason(str, Enum):
    """Why a participant flagged for notification was not sent a message."""

    USER_NOT_FOUND = "user-not-found"
    NO_CONTACT_ADDRESS = "no-contact-address"
    DIRECTORY_UNAVAILABLE = "directory-unavailable"
    SUPERSEDED_IN_BATCH = "superseded-in-batch"


class DeliveryOutcome(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    TIMED_OUT = "timed-out"
    SKIPPED = "skipped"
