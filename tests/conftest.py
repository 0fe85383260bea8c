"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta

import pytest

from acta_admin.config import Settings
from acta_admin.containers import AppContainer
from acta_admin.domain.admin import AdministratorRecord
from acta_admin.domain.authorization import AccessRequest, AuthorizationRecord
from acta_admin.domain.errors import PersistenceError
from acta_admin.domain.models import SenderKind
from acta_admin.domain.notifications import NotificationMessage
from acta_admin.domain.pending import PendingIdentifierRecord
from acta_admin.services.admins import AdminRegistry, AdminRepository
from acta_admin.services.audit import AuditRepository, AuditService
from acta_admin.services.authorization import (
    AuthorizationRegistry,
    AuthorizationRepository,
)
from acta_admin.services.notifications import (
    NotificationDispatcher,
    NotificationQueue,
)
from acta_admin.services.pending import (
    PendingIdentifierRepository,
    PendingIdentifierStore,
)
from acta_admin.services.review import PendingReviewService

ADMIN_TOKEN = "admin-token"


@dataclass
class FixedClock:
    """Controllable clock for services."""

    now: datetime = field(
        default_factory=lambda: datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class InMemoryAdminRepository(AdminRepository):
    """In-memory administrator repository for tests."""

    admins: dict[str, AdministratorRecord] = field(default_factory=dict)
    clock: FixedClock = field(default_factory=FixedClock)

    def get_admin(self, sender_id: str) -> AdministratorRecord | None:
        return self.admins.get(sender_id)

    def list_admins(self) -> list[AdministratorRecord]:
        return list(self.admins.values())

    def create_admin(
        self, sender_id: str, name: str, sender_kind: SenderKind, created_by: str
    ) -> AdministratorRecord:
        admin = AdministratorRecord(
            sender_id=sender_id,
            name=name,
            sender_kind=sender_kind,
            created_at=self.clock(),
            created_by=created_by,
        )
        self.admins[sender_id] = admin
        return admin

    def delete_admin(self, sender_id: str) -> bool:
        return self.admins.pop(sender_id, None) is not None


@dataclass
class InMemoryAuthorizationRepository(AuthorizationRepository):
    """In-memory authorization repository for tests."""

    records: dict[str, AuthorizationRecord] = field(default_factory=dict)
    saves: int = 0
    requests: list[AccessRequest] = field(default_factory=list)

    def get_authorization(self, sender_id: str) -> AuthorizationRecord | None:
        return self.records.get(sender_id)

    def save_authorization(self, record: AuthorizationRecord) -> None:
        self.saves += 1
        self.records[record.sender_id] = record

    def list_authorized(self) -> list[AuthorizationRecord]:
        return [record for record in self.records.values() if record.authorized]

    def list_access_requests(self) -> list[AccessRequest]:
        return sorted(self.requests, key=lambda r: r.requested_at, reverse=True)


@dataclass
class InMemoryPendingRepository(PendingIdentifierRepository):
    """In-memory pending identifier repository for tests."""

    records: dict[str, PendingIdentifierRecord] = field(default_factory=dict)

    def get_pending(self, identifier: str) -> PendingIdentifierRecord | None:
        return self.records.get(identifier)

    def list_pending(self) -> list[PendingIdentifierRecord]:
        return sorted(self.records.values(), key=lambda r: r.requested_at)

    def count_pending(self) -> int:
        return len(self.records)

    def create_pending(self, record: PendingIdentifierRecord) -> None:
        self.records[record.identifier] = record

    def update_attempts(self, identifier: str, attempt_count: int) -> None:
        self.records[identifier] = replace(
            self.records[identifier], attempt_count=attempt_count
        )

    def delete_pending(self, identifier: str) -> PendingIdentifierRecord | None:
        return self.records.pop(identifier, None)

    def delete_requested_before(self, cutoff: datetime) -> int:
        expired = [
            identifier
            for identifier, record in self.records.items()
            if record.requested_at <= cutoff
        ]
        for identifier in expired:
            del self.records[identifier]
        return len(expired)


@dataclass
class InMemoryNotificationQueue(NotificationQueue):
    """In-memory queue that can be told to fail for given recipients."""

    messages: list[NotificationMessage] = field(default_factory=list)
    failing_recipients: set[str] = field(default_factory=set)

    def append(self, message: NotificationMessage) -> NotificationMessage:
        if message.recipient_id in self.failing_recipients:
            raise PersistenceError(f"write failed for {message.recipient_id}")
        stored = replace(message, id=len(self.messages) + 1)
        self.messages.append(stored)
        return stored

    def list_undelivered(self, limit: int) -> list[NotificationMessage]:
        return [m for m in self.messages if not m.delivered][:limit]

    def mark_delivered(self, correlation_id: str, recipient_id: str) -> bool:
        matched = False
        for index, message in enumerate(self.messages):
            if (
                message.correlation_id == correlation_id
                and message.recipient_id == recipient_id
            ):
                self.messages[index] = replace(message, delivered=True)
                matched = True
        return matched


@dataclass
class InMemoryAuditRepository(AuditRepository):
    """In-memory audit repository for tests."""

    events: list[dict[str, object]] = field(default_factory=list)

    def create_event(
        self,
        actor: str,
        entity_type: str,
        entity_id: str,
        event_type: str,
        details: dict[str, object] | None,
    ) -> None:
        self.events.append(
            {
                "actor": actor,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "event_type": event_type,
                "details": details,
            }
        )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
        admin_token=ADMIN_TOKEN,
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def audit_repository() -> InMemoryAuditRepository:
    return InMemoryAuditRepository()


@pytest.fixture
def admin_registry(
    clock: FixedClock, audit_repository: InMemoryAuditRepository
) -> AdminRegistry:
    return AdminRegistry(
        repository=InMemoryAdminRepository(clock=clock),
        audit_service=AuditService(audit_repository),
    )


@pytest.fixture
def authorization_registry(
    admin_registry: AdminRegistry,
    audit_repository: InMemoryAuditRepository,
    clock: FixedClock,
) -> AuthorizationRegistry:
    return AuthorizationRegistry(
        repository=InMemoryAuthorizationRepository(),
        admin_registry=admin_registry,
        audit_service=AuditService(audit_repository),
        clock=clock,
    )


@pytest.fixture
def pending_store(clock: FixedClock) -> PendingIdentifierStore:
    return PendingIdentifierStore(
        repository=InMemoryPendingRepository(), max_attempts=3, clock=clock
    )


@pytest.fixture
def notification_queue() -> InMemoryNotificationQueue:
    return InMemoryNotificationQueue()


@pytest.fixture
def dispatcher(
    notification_queue: InMemoryNotificationQueue, clock: FixedClock
) -> NotificationDispatcher:
    return NotificationDispatcher(queue=notification_queue, clock=clock)


@pytest.fixture
def review_service(
    pending_store: PendingIdentifierStore,
    dispatcher: NotificationDispatcher,
    admin_registry: AdminRegistry,
) -> PendingReviewService:
    return PendingReviewService(
        store=pending_store,
        dispatcher=dispatcher,
        admin_registry=admin_registry,
        ttl_minutes=30,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    admin_registry: AdminRegistry,
    authorization_registry: AuthorizationRegistry,
    pending_store: PendingIdentifierStore,
    dispatcher: NotificationDispatcher,
    review_service: PendingReviewService,
) -> AppContainer:
    def verify_connection() -> None:
        return None

    return AppContainer(
        settings=settings,
        admin_registry=admin_registry,
        authorization_registry=authorization_registry,
        pending_store=pending_store,
        notification_dispatcher=dispatcher,
        review_service=review_service,
        verify_connection=verify_connection,
    )
