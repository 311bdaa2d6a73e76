"""Request context for tenancy enforcement."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RequestContext:
    """Identity of the person whose trips are being tracked.

    Used to scope every trip read and write.
    """

    user_id: UUID
