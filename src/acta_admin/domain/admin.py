"""Administrator domain models."""

from dataclasses import dataclass
from datetime import datetime

from acta_admin.domain.models import SenderKind


@dataclass(frozen=True)
class AdministratorRecord:
    """A sender exempt from authorization checks."""

    sender_id: str
    name: str
    sender_kind: SenderKind
    created_at: datetime
    created_by: str | None = None
