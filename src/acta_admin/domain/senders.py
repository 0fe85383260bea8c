"""Helpers for sender identifiers."""

from acta_admin.domain.errors import ValidationError
from acta_admin.domain.models import SenderKind

GROUP_SUFFIX = "@g.us"

_KIND_ALIASES: dict[str, SenderKind] = {
    "user": "user",
    "usuario": "user",
    "group": "group",
    "grupo": "group",
}


def is_group(sender_id: str | None) -> bool:
    """Return True when the sender id carries the group suffix."""
    return bool(sender_id) and sender_id.endswith(GROUP_SUFFIX)


def format_sender(sender_id: str | None) -> str:
    """Format a sender id for display, e.g. ``5211234@c.us`` -> ``+5211234``."""
    if not sender_id:
        return "Desconocido"
    return f"+{sender_id.split('@')[0]}"


def infer_kind(sender_id: str) -> SenderKind:
    """Guess the sender kind from the identifier suffix."""
    return "group" if is_group(sender_id) else "user"


def parse_kind(raw: str | None) -> SenderKind:
    """Normalize a sender kind given as English or Spanish text."""
    if raw is None:
        raise ValidationError("Tipo requerido")
    kind = _KIND_ALIASES.get(raw.strip().lower())
    if kind is None:
        raise ValidationError("Tipo inválido")
    return kind
