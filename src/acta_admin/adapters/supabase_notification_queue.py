"""Supabase table used as the outbound notification queue."""

from dataclasses import dataclass

from supabase import Client

from acta_admin.adapters.supabase_support import parse_timestamp, translate_errors
from acta_admin.domain.errors import PersistenceError
from acta_admin.domain.notifications import NotificationMessage
from acta_admin.services.notifications import NotificationQueue

_TABLE = "notificaciones"
_COLUMNS = "id, destinatario, mensaje, identificador, timestamp, procesado"


def _to_message(row: dict[str, object]) -> NotificationMessage:
    created_at = parse_timestamp(row["timestamp"])
    if created_at is None:
        raise PersistenceError(f"Notification {row['id']} has no timestamp")
    return NotificationMessage(
        id=int(row["id"]),
        recipient_id=str(row["destinatario"]),
        body=str(row["mensaje"]),
        correlation_id=str(row["identificador"]),
        created_at=created_at,
        delivered=bool(row["procesado"]),
    )


@dataclass
class SupabaseNotificationQueue(NotificationQueue):
    """Append-only queue; the table's identity column is the sequence id."""

    client: Client

    def append(self, message: NotificationMessage) -> NotificationMessage:
        """Insert one notification unit and return it with its id."""
        with translate_errors("append_notification"):
            response = (
                self.client.table(_TABLE)
                .insert(
                    {
                        "destinatario": message.recipient_id,
                        "mensaje": message.body,
                        "identificador": message.correlation_id,
                        "timestamp": message.created_at.isoformat(),
                        "procesado": False,
                    }
                )
                .execute()
            )
            if not response.data:
                raise PersistenceError("Failed to queue notification")
            return _to_message(response.data[0])

    def list_undelivered(self, limit: int) -> list[NotificationMessage]:
        """Return undelivered units in sequence order."""
        with translate_errors("list_undelivered"):
            response = (
                self.client.table(_TABLE)
                .select(_COLUMNS)
                .eq("procesado", False)
                .order("id")
                .limit(limit)
                .execute()
            )
            return [_to_message(row) for row in response.data or []]

    def mark_delivered(self, correlation_id: str, recipient_id: str) -> bool:
        """Flag units for (identificador, destinatario) as processed."""
        with translate_errors("mark_delivered"):
            response = (
                self.client.table(_TABLE)
                .update({"procesado": True})
                .eq("identificador", correlation_id)
                .eq("destinatario", recipient_id)
                .execute()
            )
            return bool(response.data)
