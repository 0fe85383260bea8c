"""Shared helpers for Supabase adapters."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

import httpx
from postgrest.exceptions import APIError

from acta_admin.domain.errors import PersistenceError
from acta_admin.domain.models import SenderKind

_KIND_TO_DB: dict[SenderKind, str] = {"user": "usuario", "group": "grupo"}
_KIND_FROM_DB: dict[str, SenderKind] = {"usuario": "user", "grupo": "group"}


@contextmanager
def translate_errors(operation: str) -> Iterator[None]:
    """Re-raise client and row-shape failures as PersistenceError."""
    try:
        yield
    except APIError as exc:
        raise PersistenceError(f"{operation}: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise PersistenceError(f"{operation}: {exc}") from exc
    except KeyError as exc:
        raise PersistenceError(f"{operation}: missing column {exc}") from exc


def parse_timestamp(value: object) -> datetime | None:
    """Parse a stored timestamp; values without an offset are taken as UTC."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise PersistenceError(f"Invalid timestamp {value!r}") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


def kind_to_db(kind: SenderKind) -> str:
    return _KIND_TO_DB[kind]


def kind_from_db(value: object) -> SenderKind:
    kind = _KIND_FROM_DB.get(str(value))
    if kind is None:
        raise PersistenceError(f"Unknown tipo_remitente {value!r}")
    return kind
