from __future__ import annotations

import asyncio

from src.session_attendance.session_attendance.common.references import ResolvedUser, UserId
from src.session_attendance.session_attendance.core.enums import SkipReason
from src.session_attendance.session_attendance.identity.model import ResolvedIdentity, SkippedIdentity
from src.session_attendance.session_attendance.identity.resolver import IdentityResolver
from src.session_attendance.session_attendance.sessions.model import Participant
from src.session_attendance.session_attendance.users.memory_user_directory import InMemoryUserDirectory
from src.session_attendance.session_attendance.users.model import User


class BrokenDirectory:
    async def find_by_ids(self, ids):
        raise ConnectionError("directory offline")


def _directory() -> InMemoryUserDirectory:
    return InMemoryUserDirectory(
        [
            User("u1", "Asha", "asha@example.com"),
            User("u2", "Ben", None),
            User("u3", "Cleo", "   "),
            User("u4", "Dev", " dev@example.com "),
        ]
    )


def test_single_batch_lookup_with_deduplicated_ids():
    directory = _directory()
    participants = [
        Participant("p1", UserId("u1")),
        Participant("p2", UserId("u4")),
        Participant("p3", UserId("u1")),
    ]

    resolutions = asyncio.run(IdentityResolver(directory).resolve(participants))

    assert directory.lookups == [("u1", "u4")]
    assert all(isinstance(r, ResolvedIdentity) for r in resolutions)
    assert [r.participant_id for r in resolutions] == ["p1", "p2", "p3"]
    assert resolutions[1].contact == "dev@example.com"


def test_skip_reasons():
    participants = [
        Participant("p1", UserId("missing")),
        Participant("p2", UserId("u2")),
        Participant("p3", UserId("u3")),
        Participant("p4", None),
    ]

    resolutions = asyncio.run(IdentityResolver(_directory()).resolve(participants))

    assert resolutions == [
        SkippedIdentity("p1", SkipReason.USER_NOT_FOUND),
        SkippedIdentity("p2", SkipReason.NO_CONTACT_ADDRESS),
        SkippedIdentity("p3", SkipReason.NO_CONTACT_ADDRESS),
        SkippedIdentity("p4", SkipReason.USER_NOT_FOUND),
    ]


def test_resolved_reference_is_still_checked_against_directory():
    stale = User("u1", "Asha", None)
    directory = _directory()

    (resolution,) = asyncio.run(IdentityResolver(directory).resolve([Participant("p1", ResolvedUser(stale))]))

    assert directory.lookups == [("u1",)]
    assert isinstance(resolution, ResolvedIdentity)
    assert resolution.contact == "asha@example.com"


def test_no_lookup_when_nothing_to_resolve():
    directory = _directory()

    assert asyncio.run(IdentityResolver(directory).resolve([])) == []
    assert directory.lookups == []


def test_directory_failure_skips_everyone():
    participants = [Participant("p1", UserId("u1")), Participant("p2", UserId("u2"))]

    resolutions = asyncio.run(IdentityResolver(BrokenDirectory()).resolve(participants))

    assert [r.reason for r in resolutions] == [SkipReason.DIRECTORY_UNAVAILABLE] * 2
