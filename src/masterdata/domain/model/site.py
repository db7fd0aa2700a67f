"""Ownership grouping of turbines."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class Site:
    """A legal owner that zero or more turbines belong to.

    ``name`` is the resolved owner name (or a placeholder embedding the property
    id when the owner could not be resolved) and is the reuse key.
    """

    name: str
    id: int | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
