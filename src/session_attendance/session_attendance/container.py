from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, SystemClock
from .database.connection import DBConfig, DatabaseConnection
from .identity.resolver import IdentityResolver
from .notifications.composer import AttendanceMessageComposer, MessageComposer
from .notifications.console_notifier import ConsoleNotifier
from .notifications.dispatcher import NotificationDispatcher
from .notifications.notifier import Notifier
from .notifications.smtp_notifier import SMTPNotifier, SMTPSettings
from .progress.service import ProgressService
from .sessions.memory_session_store import InMemorySessionStore
from .sessions.mysql_session_store import MySQLSessionStore
from .sessions.repository import SessionStore
from .users.memory_user_directory import InMemoryUserDirectory
from .users.mysql_user_directory import MySQLUserDirectory
from .users.repository import UserDirectory


@dataclass(frozen=True)
class Container:
    clock: Clock

    session_store: SessionStore
    user_directory: UserDirectory
    notifier: Notifier

    identity_resolver: IdentityResolver
    dispatcher: NotificationDispatcher
    attendance_service: AttendanceService
    progress_service: ProgressService


def build_container(
    *,
    storage_backend: str = "memory",
    db_config: Optional[dict] = None,
    notifier: str = "console",
    smtp: Optional[SMTPSettings] = None,
    dispatch_timeout_seconds: Optional[float] = None,
    clock: Optional[Clock] = None,
    composer: Optional[MessageComposer] = None,
    session_store: Optional[SessionStore] = None,
    user_directory: Optional[UserDirectory] = None,
    notifier_impl: Optional[Notifier] = None,
) -> Container:
    """Wire the object graph. Explicit instances win over the named backends."""
    clock = clock or SystemClock()

    if session_store is None or user_directory is None:
        if storage_backend == "mysql":
            if not db_config:
                raise ValueError("storage_backend=mysql requires db_config")
            conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
            session_store = session_store or MySQLSessionStore(conn)
            user_directory = user_directory or MySQLUserDirectory(conn)
        elif storage_backend == "memory":
            session_store = session_store or InMemorySessionStore()
            user_directory = user_directory or InMemoryUserDirectory()
        else:
            raise ValueError(f"Unknown storage backend: {storage_backend!r}")

    if notifier_impl is None:
        if notifier == "smtp":
            if smtp is None:
                raise ValueError("notifier=smtp requires SMTP settings")
            notifier_impl = SMTPNotifier(smtp)
        elif notifier == "console":
            notifier_impl = ConsoleNotifier()
        else:
            raise ValueError(f"Unknown notifier: {notifier!r}")

    identity_resolver = IdentityResolver(user_directory)
    dispatcher = NotificationDispatcher(notifier_impl, timeout_seconds=dispatch_timeout_seconds)
    attendance_service = AttendanceService(
        session_store,
        identity_resolver,
        dispatcher,
        composer=composer or AttendanceMessageComposer(),
        clock=clock,
    )
    progress_service = ProgressService(session_store)

    return Container(
        clock=clock,
        session_store=session_store,
        user_directory=user_directory,
        notifier=notifier_impl,
        identity_resolver=identity_resolver,
        dispatcher=dispatcher,
        attendance_service=attendance_service,
        progress_service=progress_service,
    )


def build_container_from_settings(settings) -> Container:
    smtp = None
    if getattr(settings, "NOTIFIER", "console") == "smtp":
        smtp = SMTPSettings(
            host=settings.SMTP_HOST,
            port=int(settings.SMTP_PORT),
            from_address=settings.SMTP_FROM,
            user=getattr(settings, "SMTP_USER", None),
            password=getattr(settings, "SMTP_PASSWORD", None),
            from_name=getattr(settings, "SMTP_FROM_NAME", ""),
        )
    return build_container(
        storage_backend=getattr(settings, "STORAGE_BACKEND", "memory"),
        db_config=getattr(settings, "DB_CONFIG", None),
        notifier=getattr(settings, "NOTIFIER", "console"),
        smtp=smtp,
        dispatch_timeout_seconds=getattr(settings, "DISPATCH_TIMEOUT_SECONDS", None),
    )
