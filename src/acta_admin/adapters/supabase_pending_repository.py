"""Supabase repository for pending identifiers."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from acta_admin.adapters.supabase_support import parse_timestamp, translate_errors
from acta_admin.domain.errors import PersistenceError
from acta_admin.domain.pending import PendingIdentifierRecord
from acta_admin.services.pending import PendingIdentifierRepository

_TABLE = "identificador_remitente"
_COLUMNS = (
    "identificador, remitente_id, tipo_acta, solicita_marco, solicita_folio, "
    "es_grupo_auto_marco, intentos, fecha_solicitud, nombre_grupo"
)


def _to_record(row: dict[str, object]) -> PendingIdentifierRecord:
    requested_at = parse_timestamp(row["fecha_solicitud"])
    if requested_at is None:
        raise PersistenceError(f"Pending {row['identificador']} has no request date")
    return PendingIdentifierRecord(
        identifier=str(row["identificador"]),
        sender_id=str(row["remitente_id"]),
        document_type=str(row["tipo_acta"]),
        requested_at=requested_at,
        wants_framing=bool(row.get("solicita_marco")),
        wants_folio=bool(row.get("solicita_folio")),
        group_auto_framing=bool(row.get("es_grupo_auto_marco")),
        attempt_count=int(row.get("intentos") or 0),
        group_name=row.get("nombre_grupo"),
    )


@dataclass
class SupabasePendingRepository(PendingIdentifierRepository):
    """Supabase implementation for pending identifiers."""

    client: Client

    def get_pending(self, identifier: str) -> PendingIdentifierRecord | None:
        """Return the pending record for an identifier, if present."""
        with translate_errors("get_pending"):
            response = (
                self.client.table(_TABLE)
                .select(_COLUMNS)
                .eq("identificador", identifier)
                .limit(1)
                .execute()
            )
            if not response.data:
                return None
            return _to_record(response.data[0])

    def list_pending(self) -> list[PendingIdentifierRecord]:
        """Return pending records, oldest request first."""
        with translate_errors("list_pending"):
            response = (
                self.client.table(_TABLE)
                .select(_COLUMNS)
                .order("fecha_solicitud")
                .execute()
            )
            return [_to_record(row) for row in response.data or []]

    def count_pending(self) -> int:
        """Return the number of pending records."""
        with translate_errors("count_pending"):
            response = (
                self.client.table(_TABLE)
                .select("identificador", count="exact")
                .execute()
            )
            if response.count is not None:
                return response.count
            return len(response.data or [])

    def create_pending(self, record: PendingIdentifierRecord) -> None:
        """Insert a pending record."""
        with translate_errors("create_pending"):
            self.client.table(_TABLE).insert(
                {
                    "identificador": record.identifier,
                    "remitente_id": record.sender_id,
                    "tipo_acta": record.document_type,
                    "solicita_marco": record.wants_framing,
                    "solicita_folio": record.wants_folio,
                    "es_grupo_auto_marco": record.group_auto_framing,
                    "intentos": record.attempt_count,
                    "fecha_solicitud": record.requested_at.isoformat(),
                    "nombre_grupo": record.group_name,
                }
            ).execute()

    def update_attempts(self, identifier: str, attempt_count: int) -> None:
        """Store a new attempt count for an identifier."""
        with translate_errors("update_attempts"):
            self.client.table(_TABLE).update({"intentos": attempt_count}).eq(
                "identificador", identifier
            ).execute()

    def delete_pending(self, identifier: str) -> PendingIdentifierRecord | None:
        """Delete a pending record and return it, if it existed."""
        with translate_errors("delete_pending"):
            response = (
                self.client.table(_TABLE)
                .delete()
                .eq("identificador", identifier)
                .execute()
            )
            if not response.data:
                return None
            return _to_record(response.data[0])

    def delete_requested_before(self, cutoff: datetime) -> int:
        """Delete records requested at or before the cutoff; return the count."""
        with translate_errors("delete_requested_before"):
            response = (
                self.client.table(_TABLE)
                .delete()
                .lte("fecha_solicitud", cutoff.isoformat())
                .execute()
            )
            return len(response.data or [])
