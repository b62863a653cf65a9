from __future__ import annotations

from typing import Iterable, Sequence

from .model import User
from .repository import UserDirectory


class InMemoryUserDirectory(UserDirectory):
    def __init__(self, users: Iterable[User] = ()):
        self._users: dict[str, User] = {u.user_id: u for u in users}
        self.lookups: list[tuple[str, ...]] = []

    def add(self, user: User) -> None:
        self._users[user.user_id] = user

    async def find_by_ids(self, ids: Sequence[str]) -> Sequence[User]:
        self.lookups.append(tuple(ids))
        return [self._users[i] for i in ids if i in self._users]
