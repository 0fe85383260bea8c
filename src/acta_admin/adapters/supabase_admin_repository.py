"""Supabase administrator data access."""

from dataclasses import dataclass

from supabase import Client

from acta_admin.adapters.supabase_support import (
    kind_from_db,
    kind_to_db,
    parse_timestamp,
    translate_errors,
)
from acta_admin.domain.admin import AdministratorRecord
from acta_admin.domain.errors import PersistenceError
from acta_admin.domain.models import SenderKind, utc_now
from acta_admin.services.admins import AdminRepository

_COLUMNS = "remitente_id, nombre, tipo_remitente, fecha_creacion, creado_por"


def _to_record(row: dict[str, object]) -> AdministratorRecord:
    created_at = parse_timestamp(row["fecha_creacion"])
    if created_at is None:
        raise PersistenceError(f"Administrator {row['remitente_id']} has no date")
    return AdministratorRecord(
        sender_id=str(row["remitente_id"]),
        name=str(row["nombre"]),
        sender_kind=kind_from_db(row["tipo_remitente"]),
        created_at=created_at,
        created_by=row.get("creado_por"),
    )


@dataclass
class SupabaseAdminRepository(AdminRepository):
    """Supabase implementation for administrators."""

    client: Client

    def get_admin(self, sender_id: str) -> AdministratorRecord | None:
        """Return the administrator for a sender id, if present."""
        with translate_errors("get_admin"):
            response = (
                self.client.table("administradores")
                .select(_COLUMNS)
                .eq("remitente_id", sender_id)
                .limit(1)
                .execute()
            )
            if not response.data:
                return None
            return _to_record(response.data[0])

    def list_admins(self) -> list[AdministratorRecord]:
        """Return administrators ordered by creation time."""
        with translate_errors("list_admins"):
            response = (
                self.client.table("administradores")
                .select(_COLUMNS)
                .order("fecha_creacion")
                .execute()
            )
            return [_to_record(row) for row in response.data or []]

    def create_admin(
        self, sender_id: str, name: str, sender_kind: SenderKind, created_by: str
    ) -> AdministratorRecord:
        """Create an administrator row and return it."""
        with translate_errors("create_admin"):
            response = (
                self.client.table("administradores")
                .insert(
                    {
                        "remitente_id": sender_id,
                        "nombre": name,
                        "tipo_remitente": kind_to_db(sender_kind),
                        "fecha_creacion": utc_now().isoformat(),
                        "creado_por": created_by,
                    }
                )
                .execute()
            )
            if not response.data:
                raise PersistenceError("Failed to create administrator")
            return _to_record(response.data[0])

    def delete_admin(self, sender_id: str) -> bool:
        """Delete an administrator row, returning whether one existed."""
        with translate_errors("delete_admin"):
            response = (
                self.client.table("administradores")
                .delete()
                .eq("remitente_id", sender_id)
                .execute()
            )
            return bool(response.data)

    def ping(self) -> None:
        """Run a trivial query so connection problems surface early."""
        with translate_errors("ping"):
            self.client.table("administradores").select("remitente_id").limit(1).execute()
