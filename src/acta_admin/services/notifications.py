"""Notification dispatch onto the outbound queue."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from acta_admin.domain.admin import AdministratorRecord
from acta_admin.domain.models import utc_now
from acta_admin.domain.notifications import NotificationMessage, admin_log_key

logger = logging.getLogger(__name__)

REJECTION_TEMPLATE = (
    "❌ *Documento no encontrado*\n\n"
    "La {document_type} con CURP/código: *{identifier}* no fue encontrada "
    "en los registros.\n\n"
    "Por favor verifica los datos e intenta nuevamente."
)

ADMIN_DELETION_TEMPLATE = (
    "🗑️ *CURP eliminada del panel*\n\n"
    "Identificador: {identifier}\n"
    "Remitente original: {recipient_id}\n"
    "Razón: Documento no encontrado\n\n"
    "El usuario ha sido notificado."
)


class NotificationQueue(Protocol):
    """Append-only queue consumed by the messaging transport."""

    def append(self, message: NotificationMessage) -> NotificationMessage:
        """Store a message and return it with its sequence id."""

    def list_undelivered(self, limit: int) -> list[NotificationMessage]:
        """Return undelivered messages in sequence order."""

    def mark_delivered(self, correlation_id: str, recipient_id: str) -> bool:
        """Flag matching messages as delivered; return whether any matched."""


@dataclass
class NotificationDispatcher:
    """Turns domain events into one notification per recipient."""

    queue: NotificationQueue
    clock: Callable[[], datetime] = field(default=utc_now)

    def notify_requester(
        self, identifier: str, recipient_id: str, document_type: str
    ) -> NotificationMessage:
        """Send the rejection notice to whoever submitted the document."""
        message = self.queue.append(
            NotificationMessage(
                recipient_id=recipient_id,
                body=REJECTION_TEMPLATE.format(
                    document_type=document_type, identifier=identifier
                ),
                correlation_id=identifier,
                created_at=self.clock(),
            )
        )
        logger.info(
            "Queued rejection for %s to original requester %s",
            identifier,
            recipient_id,
        )
        return message

    def notify_admins_of_deletion(
        self,
        identifier: str,
        original_recipient_id: str,
        admins: Sequence[AdministratorRecord],
    ) -> list[NotificationMessage]:
        """Send each administrator an audit copy, one at a time."""
        body = ADMIN_DELETION_TEMPLATE.format(
            identifier=identifier, recipient_id=original_recipient_id
        )
        sent: list[NotificationMessage] = []
        for admin in admins:
            try:
                sent.append(
                    self.queue.append(
                        NotificationMessage(
                            recipient_id=admin.sender_id,
                            body=body,
                            correlation_id=admin_log_key(identifier),
                            created_at=self.clock(),
                        )
                    )
                )
            except Exception:
                logger.exception(
                    "Failed to queue deletion log for administrator %s",
                    admin.sender_id,
                )
        return sent

    def pending_notifications(self, limit: int = 50) -> list[NotificationMessage]:
        return self.queue.list_undelivered(limit)

    def acknowledge(self, correlation_id: str, recipient_id: str) -> bool:
        """Mark a unit as delivered; repeating the call is harmless."""
        return self.queue.mark_delivered(correlation_id, recipient_id)
