"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass

from supabase import create_client

from acta_admin.adapters.supabase_admin_repository import SupabaseAdminRepository
from acta_admin.adapters.supabase_audit_repository import SupabaseAuditRepository
from acta_admin.adapters.supabase_authorization_repository import (
    SupabaseAuthorizationRepository,
)
from acta_admin.adapters.supabase_notification_queue import (
    SupabaseNotificationQueue,
)
from acta_admin.adapters.supabase_pending_repository import (
    SupabasePendingRepository,
)
from acta_admin.config import Settings
from acta_admin.services.admins import AdminRegistry
from acta_admin.services.audit import AuditService
from acta_admin.services.authorization import AuthorizationRegistry
from acta_admin.services.notifications import NotificationDispatcher
from acta_admin.services.pending import PendingIdentifierStore
from acta_admin.services.review import PendingReviewService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    admin_registry: AdminRegistry
    authorization_registry: AuthorizationRegistry
    pending_store: PendingIdentifierStore
    notification_dispatcher: NotificationDispatcher
    review_service: PendingReviewService
    verify_connection: Callable[[], None]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    admin_repository = SupabaseAdminRepository(supabase_client)
    audit_service = AuditService(SupabaseAuditRepository(supabase_client))
    admin_registry = AdminRegistry(
        repository=admin_repository, audit_service=audit_service
    )
    authorization_registry = AuthorizationRegistry(
        repository=SupabaseAuthorizationRepository(supabase_client),
        admin_registry=admin_registry,
        audit_service=audit_service,
    )
    pending_store = PendingIdentifierStore(
        repository=SupabasePendingRepository(supabase_client),
        max_attempts=resolved_settings.pending_max_attempts,
    )
    notification_dispatcher = NotificationDispatcher(
        SupabaseNotificationQueue(supabase_client)
    )
    review_service = PendingReviewService(
        store=pending_store,
        dispatcher=notification_dispatcher,
        admin_registry=admin_registry,
        ttl_minutes=resolved_settings.pending_ttl_minutes,
    )

    return AppContainer(
        settings=resolved_settings,
        admin_registry=admin_registry,
        authorization_registry=authorization_registry,
        pending_store=pending_store,
        notification_dispatcher=notification_dispatcher,
        review_service=review_service,
        verify_connection=admin_repository.ping,
    )
