"""Lifecycle of document identifiers awaiting verification."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Protocol

from acta_admin.domain.errors import NotFoundError, ValidationError
from acta_admin.domain.models import utc_now
from acta_admin.domain.pending import PendingIdentifierRecord, PendingIdentifierView

logger = logging.getLogger(__name__)


class PendingIdentifierRepository(Protocol):
    """Persistence interface for pending identifiers."""

    def get_pending(self, identifier: str) -> PendingIdentifierRecord | None:
        """Return the pending record for an identifier, if present."""

    def list_pending(self) -> list[PendingIdentifierRecord]:
        """Return pending records, oldest request first."""

    def count_pending(self) -> int:
        """Return the number of pending records."""

    def create_pending(self, record: PendingIdentifierRecord) -> None:
        """Insert a pending record."""

    def update_attempts(self, identifier: str, attempt_count: int) -> None:
        """Store a new attempt count for an identifier."""

    def delete_pending(self, identifier: str) -> PendingIdentifierRecord | None:
        """Delete a pending record and return it, if it existed."""

    def delete_requested_before(self, cutoff: datetime) -> int:
        """Delete records requested at or before the cutoff; return the count."""


@dataclass
class PendingIdentifierStore:
    """Tracks pending identifiers and their age."""

    repository: PendingIdentifierRepository
    max_attempts: int = 3
    clock: Callable[[], datetime] = field(default=utc_now)

    def register(  # noqa: PLR0913
        self,
        identifier: str,
        sender_id: str,
        document_type: str,
        wants_framing: bool = False,
        wants_folio: bool = False,
        group_auto_framing: bool = False,
        group_name: str | None = None,
    ) -> PendingIdentifierRecord:
        """Record a newly submitted identifier."""
        if not identifier or not sender_id:
            raise ValidationError("Identificador y remitente requeridos")
        if self.repository.get_pending(identifier) is not None:
            raise ValidationError(f"{identifier} ya está pendiente")
        record = PendingIdentifierRecord(
            identifier=identifier,
            sender_id=sender_id,
            document_type=document_type,
            requested_at=self.clock(),
            wants_framing=wants_framing,
            wants_folio=wants_folio,
            group_auto_framing=group_auto_framing,
            attempt_count=0,
            group_name=group_name,
        )
        self.repository.create_pending(record)
        return record

    def get(self, identifier: str) -> PendingIdentifierRecord | None:
        return self.repository.get_pending(identifier)

    def record_attempt(self, identifier: str) -> int:
        """Increment the attempt counter; the record stays pending."""
        record = self.repository.get_pending(identifier)
        if record is None:
            raise NotFoundError("CURP no encontrada")
        attempts = record.attempt_count + 1
        self.repository.update_attempts(identifier, attempts)
        if attempts > self.max_attempts:
            logger.warning("%s exceeded %s attempts", identifier, self.max_attempts)
        return attempts

    def list_pending(self) -> list[PendingIdentifierView]:
        """Return pending records annotated with their current age."""
        now = self.clock()
        return [
            PendingIdentifierView(
                record=record,
                elapsed_minutes=record.elapsed_minutes(now),
                attempts_exceeded=record.attempt_count > self.max_attempts,
            )
            for record in self.repository.list_pending()
        ]

    def count(self) -> int:
        return self.repository.count_pending()

    def remove(self, identifier: str) -> PendingIdentifierRecord:
        """Delete a pending identifier and return what was removed."""
        removed = self.repository.delete_pending(identifier)
        if removed is None:
            raise NotFoundError("CURP no encontrada")
        return removed

    def sweep_expired(self, ttl_minutes: int) -> int:
        """Drop records whose floored age exceeds the TTL. Never notifies."""
        # floor(age / 60s) > ttl  <=>  age >= (ttl + 1) minutes
        cutoff = self.clock() - timedelta(minutes=ttl_minutes + 1)
        removed = self.repository.delete_requested_before(cutoff)
        if removed:
            logger.info("Swept %s expired pending identifiers", removed)
        return removed
