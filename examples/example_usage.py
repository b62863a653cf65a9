"""Example: drive the service layer directly (no Flask).

Runs two batches against an in-memory session and prints the reports. The second
batch repeats one participant's status, so only the other participant is notified.
"""

import asyncio
import json
import logging
from datetime import date, time

from src.session_attendance.session_attendance.attendance.model import AttendanceEntry, MarkRequest
from src.session_attendance.session_attendance.common.references import UserId
from src.session_attendance.session_attendance.container import build_container
from src.session_attendance.session_attendance.sessions.model import Participant, Session
from src.session_attendance.session_attendance.users.model import User


async def run() -> None:
    container = build_container()
    container.user_directory.add(User("u1", "Asha", "asha@example.com"))
    container.user_directory.add(User("u2", "Ben", "ben@example.com"))
    container.session_store.add_session(
        Session(
            session_id="s1",
            title="Saturday Batting Clinic",
            scheduled_date=date(2026, 10, 17),
            start_time=time(9, 0),
            end_time=time(10, 30),
            participants=(Participant("p1", UserId("u1")), Participant("p2", UserId("u2"))),
        )
    )

    first = await container.attendance_service.mark_attendance(
        MarkRequest("s1", (AttendanceEntry("p1", True), AttendanceEntry("p2", False)), actor="coach-1")
    )
    second = await container.attendance_service.mark_attendance(
        MarkRequest("s1", (AttendanceEntry("p1", True), AttendanceEntry("p2", True)), actor="coach-1")
    )
    print(json.dumps(first.to_dict(), indent=2))
    print(json.dumps(second.to_dict(), indent=2))


def main():
    logging.basicConfig(level=logging.INFO)
    asyncio.run(run())


if __name__ == "__main__":
    main()
