"""Administrative review of pending identifiers."""

import logging
from dataclasses import dataclass, field

from acta_admin.domain.notifications import NotificationMessage
from acta_admin.domain.pending import PendingIdentifierRecord
from acta_admin.services.admins import AdminRegistry
from acta_admin.services.notifications import NotificationDispatcher
from acta_admin.services.pending import PendingIdentifierStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeletionOutcome:
    """Removed record plus whatever notifications made it onto the queue."""

    record: PendingIdentifierRecord
    notifications: list[NotificationMessage] = field(default_factory=list)


@dataclass(frozen=True)
class SweepOutcome:
    removed: int
    remaining: int


@dataclass
class PendingReviewService:
    """Deletes or expires pending identifiers and fans out the results."""

    store: PendingIdentifierStore
    dispatcher: NotificationDispatcher
    admin_registry: AdminRegistry
    ttl_minutes: int = 30

    def delete_pending(self, identifier: str, notify: bool = True) -> DeletionOutcome:
        """Remove an identifier and tell the requester and administrators.

        The deletion stands even if queuing any notification fails.
        """
        record = self.store.remove(identifier)
        if not notify:
            return DeletionOutcome(record=record)

        notifications: list[NotificationMessage] = []
        try:
            notifications.append(
                self.dispatcher.notify_requester(
                    identifier=record.identifier,
                    recipient_id=record.sender_id,
                    document_type=record.document_type,
                )
            )
        except Exception:
            logger.exception("Failed to notify requester of %s", identifier)

        try:
            admins = self.admin_registry.list()
        except Exception:
            logger.exception("Could not load administrators for %s", identifier)
            admins = []
        if admins:
            notifications.extend(
                self.dispatcher.notify_admins_of_deletion(
                    identifier=record.identifier,
                    original_recipient_id=record.sender_id,
                    admins=admins,
                )
            )
            logger.info("Deletion of %s logged to administrators", identifier)
        return DeletionOutcome(record=record, notifications=notifications)

    def sweep_expired(self, ttl_minutes: int | None = None) -> SweepOutcome:
        """Silently discard identifiers older than the TTL."""
        removed = self.store.sweep_expired(
            self.ttl_minutes if ttl_minutes is None else ttl_minutes
        )
        return SweepOutcome(removed=removed, remaining=self.store.count())
