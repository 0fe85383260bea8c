"""Authorization domain models."""

from dataclasses import dataclass, field
from datetime import datetime

from acta_admin.domain.models import SenderKind


@dataclass(frozen=True)
class AuthorizationRecord:
    """Authorization state and special configuration for a sender."""

    sender_id: str
    sender_kind: SenderKind
    authorized: bool
    authorized_at: datetime | None = None
    auto_framing: bool = False
    auto_api_upload: bool = False
    configured_by: str | None = None
    configured_at: datetime | None = None
    group_name: str | None = None


@dataclass(frozen=True)
class AuthorizationOutcome:
    """Whether an authorize/revoke call changed anything."""

    applied: bool


@dataclass(frozen=True)
class SpecialConfig:
    """Per-sender automation flags."""

    auto_framing: bool = False
    auto_api_upload: bool = False


@dataclass(frozen=True)
class AuthorizedSenders:
    """Active authorizations partitioned by sender kind."""

    users: list[AuthorizationRecord] = field(default_factory=list)
    groups: list[AuthorizationRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.users) + len(self.groups)


@dataclass(frozen=True)
class AccessRequest:
    """A sender that asked for processing rights."""

    sender_id: str
    sender_kind: SenderKind
    requested_at: datetime
    sender_name: str | None = None


@dataclass(frozen=True)
class PendingAccessRequests:
    """Unanswered access requests partitioned by sender kind."""

    users: list[AccessRequest] = field(default_factory=list)
    groups: list[AccessRequest] = field(default_factory=list)
