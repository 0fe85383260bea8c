"""Authorization state machine for senders."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Protocol

from acta_admin.domain.authorization import (
    AccessRequest,
    AuthorizationOutcome,
    AuthorizationRecord,
    AuthorizedSenders,
    PendingAccessRequests,
    SpecialConfig,
)
from acta_admin.domain.errors import AdminConflictError, NotFoundError
from acta_admin.domain.models import OperationResult, SenderKind, utc_now
from acta_admin.domain.senders import infer_kind
from acta_admin.services.admins import AdminRegistry
from acta_admin.services.audit import AuditService

logger = logging.getLogger(__name__)

_KIND_LABELS: dict[SenderKind, str] = {"user": "Usuario", "group": "Grupo"}


class AuthorizationRepository(Protocol):
    """Persistence interface for sender authorizations."""

    def get_authorization(self, sender_id: str) -> AuthorizationRecord | None:
        """Return the authorization row for a sender, if present."""

    def save_authorization(self, record: AuthorizationRecord) -> None:
        """Insert or update the authorization row keyed by sender id."""

    def list_authorized(self) -> list[AuthorizationRecord]:
        """Return rows with authorized = true, oldest first."""

    def list_access_requests(self) -> list[AccessRequest]:
        """Return unapproved access requests, newest first."""


@dataclass
class AuthorizationRegistry:
    """Grants and revokes automated processing rights."""

    repository: AuthorizationRepository
    admin_registry: AdminRegistry
    audit_service: AuditService
    clock: Callable[[], datetime] = field(default=utc_now)

    def authorize(
        self, sender_id: str, sender_kind: SenderKind, actor: str
    ) -> AuthorizationOutcome:
        """Authorize a sender; a no-op when it is already authorized."""
        if self.admin_registry.is_admin(sender_id):
            raise AdminConflictError(
                "No se puede autorizar a un administrador. "
                "Los administradores tienen acceso automático."
            )
        current = self.repository.get_authorization(sender_id)
        if current and current.authorized:
            return AuthorizationOutcome(applied=False)
        now = self.clock()
        if current is None:
            record = AuthorizationRecord(
                sender_id=sender_id,
                sender_kind=sender_kind,
                authorized=True,
                authorized_at=now,
            )
        else:
            record = replace(
                current, sender_kind=sender_kind, authorized=True, authorized_at=now
            )
        self.repository.save_authorization(record)
        self.audit_service.record_event(
            actor=actor,
            entity_type="authorization",
            entity_id=sender_id,
            event_type="authorized",
            details={"sender_kind": sender_kind},
        )
        logger.info("%s %s authorized by %s", sender_kind, sender_id, actor)
        return AuthorizationOutcome(applied=True)

    def revoke(self, sender_id: str, sender_kind: SenderKind) -> AuthorizationOutcome:
        """Revoke an active authorization, keeping the row as history."""
        current = self.repository.get_authorization(sender_id)
        if (
            current is None
            or not current.authorized
            or current.sender_kind != sender_kind
        ):
            raise NotFoundError(
                f"{_KIND_LABELS[sender_kind]} no encontrado en autorizados"
            )
        self.repository.save_authorization(replace(current, authorized=False))
        logger.info("%s %s revoked", sender_kind, sender_id)
        return AuthorizationOutcome(applied=True)

    def is_authorized(self, sender_id: str) -> bool:
        """Administrators are implicitly authorized."""
        if self.admin_registry.is_admin(sender_id):
            return True
        current = self.repository.get_authorization(sender_id)
        return bool(current and current.authorized)

    def update_special_config(
        self, sender_id: str, auto_framing: bool, auto_api_upload: bool, actor: str
    ) -> OperationResult:
        """Set the automation flags for a sender, creating the row if needed."""
        if not sender_id or not sender_id.strip():
            return OperationResult(success=False, message="ID de remitente requerido")
        now = self.clock()
        current = self.repository.get_authorization(sender_id)
        if current is None:
            current = AuthorizationRecord(
                sender_id=sender_id,
                sender_kind=infer_kind(sender_id),
                authorized=False,
            )
        self.repository.save_authorization(
            replace(
                current,
                auto_framing=auto_framing,
                auto_api_upload=auto_api_upload,
                configured_by=actor,
                configured_at=now,
            )
        )
        self.audit_service.record_event(
            actor=actor,
            entity_type="special_config",
            entity_id=sender_id,
            event_type="updated",
            details={
                "auto_framing": auto_framing,
                "auto_api_upload": auto_api_upload,
            },
        )
        return OperationResult(
            success=True,
            message=f"Configuración especial actualizada para {sender_id}",
        )

    def get_special_config(self, sender_id: str) -> SpecialConfig:
        current = self.repository.get_authorization(sender_id)
        if current is None:
            return SpecialConfig()
        return SpecialConfig(
            auto_framing=current.auto_framing,
            auto_api_upload=current.auto_api_upload,
        )

    def should_auto_frame(self, sender_id: str) -> bool:
        return self.get_special_config(sender_id).auto_framing

    def should_auto_upload(self, sender_id: str) -> bool:
        return self.get_special_config(sender_id).auto_api_upload

    def list_authorized(self) -> AuthorizedSenders:
        """Return active authorizations split into users and groups."""
        records = self.repository.list_authorized()
        return AuthorizedSenders(
            users=[r for r in records if r.authorized and r.sender_kind == "user"],
            groups=[r for r in records if r.authorized and r.sender_kind == "group"],
        )

    def list_pending_requests(self) -> PendingAccessRequests:
        """Return senders that asked for access and are not yet authorized."""
        authorized = {r.sender_id for r in self.repository.list_authorized()}
        admins = {admin.sender_id for admin in self.admin_registry.list()}
        seen: set[str] = set()
        pending: list[AccessRequest] = []
        for request in self.repository.list_access_requests():
            sender_id = request.sender_id
            if sender_id in seen or sender_id in authorized or sender_id in admins:
                continue
            seen.add(sender_id)
            pending.append(request)
        return PendingAccessRequests(
            users=[r for r in pending if r.sender_kind == "user"],
            groups=[r for r in pending if r.sender_kind == "group"],
        )

    def promote_to_admin(
        self, sender_id: str, name: str, sender_kind: SenderKind, actor: str
    ) -> OperationResult:
        """Make a sender an administrator and drop its active authorization."""
        result = self.admin_registry.add(sender_id, name, sender_kind, actor=actor)
        if not result.success:
            return result
        current = self.repository.get_authorization(sender_id)
        if current and current.authorized:
            self.repository.save_authorization(replace(current, authorized=False))
            logger.info("Authorization of %s superseded by admin status", sender_id)
        return result
