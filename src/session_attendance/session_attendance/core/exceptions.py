class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when a batch request is malformed; nothing has been written yet."""


class NotFoundError(DomainError):
    """Raised when a session or participant does not exist."""


class PersistenceFailure(DomainError):
    """Raised by a session store when a participant state could not be written."""


class ConcurrentModificationError(PersistenceFailure):
    """Raised when a write carries a stale session version.

    Another batch opened the same session after this one took its snapshot.
    """


class DispatchFailure(DomainError):
    """Raised by a notifier when a single send attempt failed."""


class IdentityResolutionGap(DomainError):
    """A participant has no directory match or no contact address.

    Never raised to callers of the batch operation; the resolver turns it into a
    skip reason.
    """

    def __init__(self, participant_id: str, reason):
        super().__init__(f"{participant_id}: {reason.value}")
        self.participant_id = participant_id
        self.reason = reason
