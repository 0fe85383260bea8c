"""Notification domain models."""

from dataclasses import dataclass
from datetime import datetime

ADMIN_LOG_PREFIX = "admin_log_"


@dataclass(frozen=True)
class NotificationMessage:
    """One outbound message for a single recipient."""

    recipient_id: str
    body: str
    correlation_id: str
    created_at: datetime
    delivered: bool = False
    id: int | None = None


def admin_log_key(identifier: str) -> str:
    """Correlation id used for the administrators' copy of a deletion."""
    return f"{ADMIN_LOG_PREFIX}{identifier}"
