"""Administrator registry."""

import logging
from dataclasses import dataclass
from typing import Protocol

from acta_admin.domain.admin import AdministratorRecord
from acta_admin.domain.models import OperationResult, SenderKind
from acta_admin.services.audit import AuditService

logger = logging.getLogger(__name__)


class AdminRepository(Protocol):
    """Persistence interface for administrators."""

    def get_admin(self, sender_id: str) -> AdministratorRecord | None:
        """Return the administrator for a sender id, if present."""

    def list_admins(self) -> list[AdministratorRecord]:
        """Return administrators ordered by creation time."""

    def create_admin(
        self, sender_id: str, name: str, sender_kind: SenderKind, created_by: str
    ) -> AdministratorRecord:
        """Create an administrator row and return it."""

    def delete_admin(self, sender_id: str) -> bool:
        """Delete an administrator row, returning whether one existed."""


@dataclass
class AdminRegistry:
    """Maintains the set of senders exempt from authorization."""

    repository: AdminRepository
    audit_service: AuditService

    def is_admin(self, sender_id: str) -> bool:
        return self.repository.get_admin(sender_id) is not None

    def list(self) -> list[AdministratorRecord]:
        return self.repository.list_admins()

    def add(
        self, sender_id: str, name: str, sender_kind: SenderKind, actor: str
    ) -> OperationResult:
        """Register a new administrator."""
        if not sender_id or not name:
            return OperationResult(
                success=False, message="ID de remitente y nombre son requeridos"
            )
        if self.is_admin(sender_id):
            return OperationResult(
                success=False, message=f"{sender_id} ya es administrador"
            )
        self.repository.create_admin(sender_id, name, sender_kind, created_by=actor)
        self.audit_service.record_event(
            actor=actor,
            entity_type="administrator",
            entity_id=sender_id,
            event_type="added",
            details={"name": name, "sender_kind": sender_kind},
        )
        logger.info("Administrator %s added by %s", sender_id, actor)
        return OperationResult(
            success=True, message=f"Administrador {name} agregado exitosamente"
        )

    def remove(self, sender_id: str, actor: str) -> OperationResult:
        """Remove an existing administrator."""
        if not self.repository.delete_admin(sender_id):
            return OperationResult(
                success=False, message=f"{sender_id} no es administrador"
            )
        self.audit_service.record_event(
            actor=actor,
            entity_type="administrator",
            entity_id=sender_id,
            event_type="removed",
        )
        logger.info("Administrator %s removed by %s", sender_id, actor)
        return OperationResult(
            success=True, message="Administrador removido exitosamente"
        )
