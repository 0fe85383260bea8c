"""Pydantic models for admin API request bodies.

Fields are optional so missing values reach the handlers and are reported
as 400 failures instead of schema errors.
"""

from pydantic import BaseModel


class SenderRequest(BaseModel):
    """Authorize/revoke payload."""

    id: str | None = None
    type: str | None = None


class DeletePendingRequest(BaseModel):
    identificador: str | None = None
    notificar: bool = True


class AddAdministratorRequest(BaseModel):
    remitente_id: str | None = None
    nombre: str | None = None
    tipo_remitente: str | None = None


class RemoveAdministratorRequest(BaseModel):
    remitente_id: str | None = None


class SpecialConfigRequest(BaseModel):
    remitente_id: str | None = None
    enmarcado_automatico: bool = False
    subir_api_automatico: bool = False


class AcknowledgeRequest(BaseModel):
    """Sent by the messaging transport after delivering a unit."""

    identificador: str | None = None
    destinatario: str | None = None
