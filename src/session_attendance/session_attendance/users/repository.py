from __future__ import annotations

from typing import Protocol, Sequence

from .model import User


class UserDirectory(Protocol):
    async def find_by_ids(self, ids: Sequence[str]) -> Sequence[User]:
        """Batch lookup. Unknown ids are simply absent from the result."""

        raise NotImplementedError
