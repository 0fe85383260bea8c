"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import (
    APIRouter,
    Depends,
    Header,
    HTTPException,
    Query,
    Request,
    status,
)

from acta_admin.api.admin_models import (
    AcknowledgeRequest,
    AddAdministratorRequest,
    DeletePendingRequest,
    RemoveAdministratorRequest,
    SenderRequest,
    SpecialConfigRequest,
)
from acta_admin.domain.errors import ValidationError
from acta_admin.domain.models import utc_now
from acta_admin.domain.senders import format_sender, infer_kind, is_group, parse_kind

if TYPE_CHECKING:
    from datetime import datetime

    from acta_admin.containers import AppContainer
    from acta_admin.domain.admin import AdministratorRecord
    from acta_admin.domain.authorization import AccessRequest, AuthorizationRecord
    from acta_admin.domain.notifications import NotificationMessage
    from acta_admin.domain.pending import PendingIdentifierView

_KIND_LABELS = {"user": "Usuario", "group": "Grupo"}
_DB_KIND = {"user": "usuario", "group": "grupo"}


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


router = APIRouter(
    prefix="/admin/api", tags=["admin"], dependencies=[Depends(require_admin)]
)


@router.get("/status")
async def connection_status(request: Request) -> dict[str, object]:
    """Report whether the store answers a trivial query."""
    container: AppContainer = request.app.state.container
    container.verify_connection()
    return {"success": True, "database": "ok"}


@router.get("/authorized")
async def list_authorized(request: Request) -> dict[str, object]:
    """Return authorized users, groups and administrators."""
    container: AppContainer = request.app.state.container
    authorized = container.authorization_registry.list_authorized()
    admins = container.admin_registry.list()
    return {
        "success": True,
        "usuarios": [_serialize_user(record) for record in authorized.users],
        "grupos": [_serialize_group(record) for record in authorized.groups],
        "administradores": [_serialize_admin(admin) for admin in admins],
        "total_autorizados": authorized.total,
        "total_administradores": len(admins),
        "timestamp": utc_now().isoformat(),
    }


@router.post("/authorize")
async def authorize(payload: SenderRequest, request: Request) -> dict[str, object]:
    """Grant processing rights to a user or group."""
    container: AppContainer = request.app.state.container
    if not payload.id or not payload.type:
        raise ValidationError("ID y tipo requeridos")
    kind = parse_kind(payload.type)
    outcome = container.authorization_registry.authorize(
        payload.id, kind, actor=container.settings.panel_actor
    )
    label = _KIND_LABELS[kind]
    if outcome.applied:
        return {"success": True, "message": f"{label} autorizado exitosamente"}
    return {"success": True, "message": f"{label} ya estaba autorizado"}


@router.post("/revoke")
async def revoke(payload: SenderRequest, request: Request) -> dict[str, object]:
    """Revoke an active authorization."""
    container: AppContainer = request.app.state.container
    if not payload.id or not payload.type:
        raise ValidationError("ID y tipo requeridos")
    kind = parse_kind(payload.type)
    container.authorization_registry.revoke(payload.id, kind)
    label = _KIND_LABELS[kind].lower()
    return {
        "success": True,
        "message": f"Autorización de {label} revocada exitosamente",
    }


@router.get("/pending")
async def list_access_requests(request: Request) -> dict[str, object]:
    """Return senders that asked for access and are not authorized yet."""
    container: AppContainer = request.app.state.container
    requests = container.authorization_registry.list_pending_requests()
    return {
        "success": True,
        "usuarios_pendientes": [_serialize_request(r) for r in requests.users],
        "grupos_pendientes": [_serialize_request(r) for r in requests.groups],
    }


@router.get("/curp-pendientes")
async def list_pending(request: Request) -> dict[str, object]:
    """Return identifiers awaiting verification with their age."""
    container: AppContainer = request.app.state.container
    views = container.pending_store.list_pending()
    return {"success": True, "pendientes": [_serialize_pending(v) for v in views]}


@router.post("/eliminar-curp-pendiente")
async def delete_pending(
    payload: DeletePendingRequest, request: Request
) -> dict[str, object]:
    """Delete a pending identifier and optionally notify its requester."""
    container: AppContainer = request.app.state.container
    if not payload.identificador:
        raise ValidationError("Identificador requerido")
    container.review_service.delete_pending(
        payload.identificador, notify=payload.notificar
    )
    suffix = " y usuario original notificado" if payload.notificar else ""
    return {
        "success": True,
        "message": f"CURP {payload.identificador} eliminada exitosamente{suffix}",
    }


@router.post("/limpiar-curps-expiradas")
async def sweep_expired(request: Request) -> dict[str, object]:
    """Discard identifiers older than the configured TTL."""
    container: AppContainer = request.app.state.container
    outcome = container.review_service.sweep_expired()
    return {
        "success": True,
        "message": "Limpieza completada",
        "eliminadas": outcome.removed,
        "mantenidas": outcome.remaining,
    }


@router.get("/administrators")
async def list_administrators(request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    admins = container.admin_registry.list()
    return {
        "success": True,
        "administradores": [_serialize_admin(admin) for admin in admins],
        "total": len(admins),
    }


@router.post("/add-administrator")
async def add_administrator(
    payload: AddAdministratorRequest, request: Request
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    if not payload.remitente_id or not payload.nombre:
        raise ValidationError("ID de remitente y nombre son requeridos")
    kind = (
        parse_kind(payload.tipo_remitente)
        if payload.tipo_remitente
        else infer_kind(payload.remitente_id)
    )
    result = container.authorization_registry.promote_to_admin(
        payload.remitente_id,
        payload.nombre,
        kind,
        actor=container.settings.panel_actor,
    )
    if not result.success:
        raise ValidationError(result.message)
    return {"success": True, "message": result.message}


@router.post("/remove-administrator")
async def remove_administrator(
    payload: RemoveAdministratorRequest, request: Request
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    if not payload.remitente_id:
        raise ValidationError("ID de remitente requerido")
    result = container.admin_registry.remove(
        payload.remitente_id, actor=container.settings.panel_actor
    )
    if not result.success:
        raise ValidationError(result.message)
    return {"success": True, "message": result.message}


@router.post("/update-special-config")
async def update_special_config(
    payload: SpecialConfigRequest, request: Request
) -> dict[str, object]:
    """Set automatic framing and API upload flags for a sender."""
    container: AppContainer = request.app.state.container
    if not payload.remitente_id:
        raise ValidationError("ID de remitente requerido")
    result = container.authorization_registry.update_special_config(
        payload.remitente_id,
        auto_framing=payload.enmarcado_automatico,
        auto_api_upload=payload.subir_api_automatico,
        actor=container.settings.panel_actor,
    )
    if not result.success:
        raise ValidationError(result.message)
    return {"success": True, "message": result.message}


@router.get("/notificaciones")
async def list_notifications(
    request: Request, limit: int | None = Query(default=None, ge=1)
) -> dict[str, object]:
    """Return undelivered notification units for the transport."""
    container: AppContainer = request.app.state.container
    batch = limit or container.settings.notification_batch_size
    messages = container.notification_dispatcher.pending_notifications(batch)
    return {
        "success": True,
        "notificaciones": [_serialize_notification(m) for m in messages],
    }


@router.post("/notificaciones/confirmar")
async def acknowledge_notification(
    payload: AcknowledgeRequest, request: Request
) -> dict[str, object]:
    """Mark a unit delivered; safe to repeat."""
    container: AppContainer = request.app.state.container
    if not payload.identificador or not payload.destinatario:
        raise ValidationError("Identificador y destinatario requeridos")
    matched = container.notification_dispatcher.acknowledge(
        payload.identificador, payload.destinatario
    )
    message = "Notificación confirmada" if matched else "Sin notificaciones pendientes"
    return {"success": True, "message": message}


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _serialize_user(record: AuthorizationRecord) -> dict[str, object]:
    return {
        "id": record.sender_id,
        "nombre": format_sender(record.sender_id),
        "fecha_autorizacion": _isoformat(record.authorized_at),
        "enmarcado_automatico": record.auto_framing,
        "subir_api_automatico": record.auto_api_upload,
        "configurado_por": record.configured_by,
        "fecha_configuracion": _isoformat(record.configured_at),
    }


def _serialize_group(record: AuthorizationRecord) -> dict[str, object]:
    return {
        "id": record.sender_id,
        "nombre": record.group_name or f"Grupo: {format_sender(record.sender_id)}",
        "participantes": "N/A",
        "fecha_autorizacion": _isoformat(record.authorized_at),
        "enmarcado_automatico": record.auto_framing,
        "subir_api_automatico": record.auto_api_upload,
        "configurado_por": record.configured_by,
        "fecha_configuracion": _isoformat(record.configured_at),
    }


def _serialize_request(request: AccessRequest) -> dict[str, object]:
    if request.sender_kind == "group":
        return {
            "id": request.sender_id,
            "nombre": request.sender_name
            or f"Grupo: {format_sender(request.sender_id)}",
            "participantes": "N/A",
            "fecha_solicitud": request.requested_at.isoformat(),
        }
    return {
        "id": request.sender_id,
        "nombre": request.sender_name or format_sender(request.sender_id),
        "fecha_solicitud": request.requested_at.isoformat(),
    }


def _serialize_admin(admin: AdministratorRecord) -> dict[str, object]:
    return {
        "id": admin.sender_id,
        "nombre": admin.name,
        "tipo": _DB_KIND[admin.sender_kind],
        "fecha_creacion": _isoformat(admin.created_at),
        "numero_formateado": format_sender(admin.sender_id),
    }


def _serialize_pending(view: PendingIdentifierView) -> dict[str, object]:
    record = view.record
    return {
        "identificador": record.identifier,
        "remitente_id": record.sender_id,
        "remitente_nombre": record.group_name or format_sender(record.sender_id),
        "tipo_remitente": "Grupo" if is_group(record.sender_id) else "Usuario",
        "tipo_acta": record.document_type,
        "solicita_marco": record.wants_framing,
        "solicita_folio": record.wants_folio,
        "es_grupo_auto_marco": record.group_auto_framing,
        "intentos": record.attempt_count,
        "intentos_excedidos": view.attempts_exceeded,
        "tiempo_transcurrido_min": view.elapsed_minutes,
    }


def _serialize_notification(message: NotificationMessage) -> dict[str, object]:
    return {
        "id": message.id,
        "destinatario": message.recipient_id,
        "mensaje": message.body,
        "identificador": message.correlation_id,
        "timestamp": message.created_at.isoformat(),
        "procesado": message.delivered,
    }
