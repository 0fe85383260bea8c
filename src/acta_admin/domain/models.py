"""Shared domain models."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Literal

SenderKind = Literal["user", "group"]


@dataclass(frozen=True)
class OperationResult:
    """Outcome of an administrative operation that reports instead of raising."""

    success: bool
    message: str


def utc_now() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(tz=UTC)
