"""Supabase-backed authorization repository."""

from dataclasses import dataclass

from supabase import Client

from acta_admin.adapters.supabase_support import (
    kind_from_db,
    kind_to_db,
    parse_timestamp,
    translate_errors,
)
from acta_admin.domain.authorization import AccessRequest, AuthorizationRecord
from acta_admin.domain.errors import PersistenceError
from acta_admin.domain.senders import infer_kind
from acta_admin.services.authorization import AuthorizationRepository

_COLUMNS = (
    "remitente_id, tipo_remitente, autorizado, fecha_autorizacion, "
    "enmarcado_automatico, subir_api_automatico, configurado_por, "
    "fecha_configuracion, nombre_grupo"
)


def _to_request(row: dict[str, object]) -> AccessRequest:
    sender_id = str(row["remitente_id"])
    requested_at = parse_timestamp(row["fecha_solicitud"])
    if requested_at is None:
        raise PersistenceError(f"Request from {sender_id} has no date")
    return AccessRequest(
        sender_id=sender_id,
        sender_kind=infer_kind(sender_id),
        requested_at=requested_at,
        sender_name=row.get("nombre_remitente"),
    )


def _to_record(row: dict[str, object]) -> AuthorizationRecord:
    return AuthorizationRecord(
        sender_id=str(row["remitente_id"]),
        sender_kind=kind_from_db(row["tipo_remitente"]),
        authorized=bool(row["autorizado"]),
        authorized_at=parse_timestamp(row.get("fecha_autorizacion")),
        auto_framing=bool(row.get("enmarcado_automatico")),
        auto_api_upload=bool(row.get("subir_api_automatico")),
        configured_by=row.get("configurado_por"),
        configured_at=parse_timestamp(row.get("fecha_configuracion")),
        group_name=row.get("nombre_grupo"),
    )


@dataclass
class SupabaseAuthorizationRepository(AuthorizationRepository):
    """Supabase implementation for sender authorizations."""

    client: Client

    def get_authorization(self, sender_id: str) -> AuthorizationRecord | None:
        """Return the authorization row for a sender, if present."""
        with translate_errors("get_authorization"):
            response = (
                self.client.table("autorizaciones")
                .select(_COLUMNS)
                .eq("remitente_id", sender_id)
                .limit(1)
                .execute()
            )
            if not response.data:
                return None
            return _to_record(response.data[0])

    def save_authorization(self, record: AuthorizationRecord) -> None:
        """Upsert the authorization row keyed by remitente_id."""
        with translate_errors("save_authorization"):
            self.client.table("autorizaciones").upsert(
                {
                    "remitente_id": record.sender_id,
                    "tipo_remitente": kind_to_db(record.sender_kind),
                    "autorizado": record.authorized,
                    "fecha_autorizacion": record.authorized_at.isoformat()
                    if record.authorized_at
                    else None,
                    "enmarcado_automatico": record.auto_framing,
                    "subir_api_automatico": record.auto_api_upload,
                    "configurado_por": record.configured_by,
                    "fecha_configuracion": record.configured_at.isoformat()
                    if record.configured_at
                    else None,
                    "nombre_grupo": record.group_name,
                },
                on_conflict="remitente_id",
            ).execute()

    def list_authorized(self) -> list[AuthorizationRecord]:
        """Return rows with autorizado = true, oldest first."""
        with translate_errors("list_authorized"):
            response = (
                self.client.table("autorizaciones")
                .select(_COLUMNS)
                .eq("autorizado", True)
                .order("fecha_autorizacion")
                .execute()
            )
            return [_to_record(row) for row in response.data or []]

    def list_access_requests(self) -> list[AccessRequest]:
        """Return unapproved solicitudes rows, newest first."""
        with translate_errors("list_access_requests"):
            response = (
                self.client.table("solicitudes")
                .select("remitente_id, nombre_remitente, fecha_solicitud")
                .eq("autorizado", False)
                .order("fecha_solicitud", desc=True)
                .execute()
            )
            return [_to_request(row) for row in response.data or []]
