"""Audit trail for administrative actions."""

from dataclasses import dataclass
from typing import Protocol


class AuditRepository(Protocol):
    """Persistence interface for audit events."""

    def create_event(
        self,
        actor: str,
        entity_type: str,
        entity_id: str,
        event_type: str,
        details: dict[str, object] | None,
    ) -> None:
        """Create an audit event row."""


@dataclass
class AuditService:
    """Service for recording who changed what."""

    repository: AuditRepository

    def record_event(
        self,
        actor: str,
        entity_type: str,
        entity_id: str,
        event_type: str,
        details: dict[str, object] | None = None,
    ) -> None:
        """Persist an audit event."""
        self.repository.create_event(
            actor=actor,
            entity_type=entity_type,
            entity_id=entity_id,
            event_type=event_type,
            details=details,
        )
