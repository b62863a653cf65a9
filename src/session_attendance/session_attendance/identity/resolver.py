from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.references import reference_id
from ..core.enums import SkipReason
from ..core.exceptions import IdentityResolutionGap
from ..sessions.model import Participant
from ..users.model import User
from ..users.repository import UserDirectory
from .model import IdentityResolution, ResolvedIdentity, SkippedIdentity

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Join participants to directory records carrying a contact address.

    One directory round trip per call, regardless of how many participants share
    a user. Read-only.
    """

    def __init__(self, directory: UserDirectory):
        self._directory = directory

    async def resolve(self, participants: Sequence[Participant]) -> list[IdentityResolution]:
        user_ids = [reference_id(p.user) for p in participants]
        unique_ids = list(dict.fromkeys(uid for uid in user_ids if uid))

        users_by_id: dict[str, User] = {}
        if unique_ids:
            try:
                found = await self._directory.find_by_ids(unique_ids)
            except Exception:
                logger.exception("directory lookup failed for %d users", len(unique_ids))
                return [SkippedIdentity(p.participant_id, SkipReason.DIRECTORY_UNAVAILABLE) for p in participants]
            users_by_id = {u.user_id: u for u in found}

        resolutions: list[IdentityResolution] = []
        for participant, user_id in zip(participants, user_ids):
            try:
                user = self._require_contact(participant, users_by_id.get(user_id) if user_id else None)
            except IdentityResolutionGap as gap:
                logger.info("skipping notification for participant %s: %s", gap.participant_id, gap.reason.value)
                resolutions.append(SkippedIdentity(gap.participant_id, gap.reason))
                continue
            resolutions.append(ResolvedIdentity(participant=participant, user=user))
        return resolutions

    @staticmethod
    def _require_contact(participant: Participant, user: Optional[User]) -> User:
        if user is None:
            raise IdentityResolutionGap(participant.participant_id, SkipReason.USER_NOT_FOUND)
        if not user.has_contact:
            raise IdentityResolutionGap(participant.participant_id, SkipReason.NO_CONTACT_ADDRESS)
        return user

