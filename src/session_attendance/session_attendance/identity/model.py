from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..core.enums import SkipReason
from ..sessions.model import Participant
from ..users.model import User


@dataclass(frozen=True)
class ResolvedIdentity:
    participant: Participant
    user: User

    @property
    def participant_id(self) -> str:
        return self.participant.participant_id

    @property
    def contact(self) -> str:
        return (self.user.contact_address or "").strip()


@dataclass(frozen=True)
class SkippedIdentity:
    participant_id: str
    reason: SkipReason


IdentityResolution = Union[ResolvedIdentity, SkippedIdentity]
