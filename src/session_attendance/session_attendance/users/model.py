from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class User:
    """Directory record: who a participant is and where to reach them."""

    user_id: str
    display_name: str
    contact_address: Optional[str] = None

    @property
    def has_contact(self) -> bool:
        return bool(self.contact_address and self.contact_address.strip())
