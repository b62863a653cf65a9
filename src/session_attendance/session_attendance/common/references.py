"""Tagged user references.

A participant points at its user either by bare identifier or by an already
loaded ``User``. ``reference_id`` reads the identifier out of
either shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..users.model import User


@dataclass(frozen=True)
class UserId:
    value: str


@dataclass(frozen=True)
class ResolvedUser:
    user: User


Reference = Union[UserId, ResolvedUser]


def reference_id(ref: Optional[Reference]) -> Optional[str]:
    if ref is None:
        return None
    if isinstance(ref, ResolvedUser):
        return ref.user.user_id
    return ref.value

