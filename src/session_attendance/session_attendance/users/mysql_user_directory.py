from __future__ import annotations

import asyncio
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import User
from .repository import UserDirectory


class MySQLUserDirectory(UserDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    async def find_by_ids(self, ids: Sequence[str]) -> Sequence[User]:
        if not ids:
            return []
        return await asyncio.to_thread(self._find_by_ids, list(ids))

    def _find_by_ids(self, ids: list[str]) -> list[User]:
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT user_id, display_name, contact_address
                FROM users
                WHERE user_id IN ({placeholders})
                """,
                tuple(ids),
            )
            rows = fetchall(cur)
            return [
                User(
                    user_id=str(r["user_id"]),
                    display_name=str(r["display_name"]),
                    contact_address=r.get("contact_address"),
                )
                for r in rows
            ]
