"""Supabase repository for audit events."""

from dataclasses import dataclass

from supabase import Client

from acta_admin.adapters.supabase_support import translate_errors
from acta_admin.services.audit import AuditRepository


@dataclass
class SupabaseAuditRepository(AuditRepository):
    """Supabase-backed audit repository."""

    client: Client

    def create_event(
        self,
        actor: str,
        entity_type: str,
        entity_id: str,
        event_type: str,
        details: dict[str, object] | None,
    ) -> None:
        """Create an audit event row."""
        with translate_errors("create_audit_event"):
            self.client.table("auditoria").insert(
                {
                    "actor": actor,
                    "entity_type": entity_type,
                    "entity_id": entity_id,
                    "event_type": event_type,
                    "details_json": details,
                }
            ).execute()
