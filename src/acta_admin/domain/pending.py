"""Pending identifier domain models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PendingIdentifierRecord:
    """A document code awaiting verification."""

    identifier: str
    sender_id: str
    document_type: str
    requested_at: datetime
    wants_framing: bool = False
    wants_folio: bool = False
    group_auto_framing: bool = False
    attempt_count: int = 0
    group_name: str | None = None

    def elapsed_minutes(self, now: datetime) -> int:
        """Whole minutes since the request, floored."""
        seconds = (now - self.requested_at).total_seconds()
        return int(seconds // 60)


@dataclass(frozen=True)
class PendingIdentifierView:
    """A pending record annotated at read time."""

    record: PendingIdentifierRecord
    elapsed_minutes: int
    attempts_exceeded: bool
